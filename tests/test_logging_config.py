"""Tests for the root logger setup.

pytest attaches its own capture handlers to the root logger while a
test body runs, so each test swaps in an empty handler list itself and
puts pytest's handlers back before returning.
"""

import logging
from contextlib import contextmanager

import pytest

from ranking_admin_api.app.core.logging_config import QUIET_LOGGERS, setup_logging


@pytest.fixture
def restore_levels():
    names = ("",) + QUIET_LOGGERS
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


@contextmanager
def root_handlers(*handlers):
    """Run with ``root.handlers`` replaced, closing anything added meanwhile."""
    root = logging.getLogger()
    saved = root.handlers
    root.handlers = list(handlers)
    try:
        yield root
    finally:
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers = saved


def test_installs_handlers_once(restore_levels, tmp_path):
    logfile = tmp_path / "api.log"

    with root_handlers() as root:
        assert setup_logging("debug", str(logfile)) is True
        assert setup_logging("info") is False

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        logging.getLogger("ranking_admin_api.test").debug("hello file")
        for handler in root.handlers:
            handler.flush()

    assert "[DEBUG] ranking_admin_api.test: hello file" in logfile.read_text(encoding="utf-8")


def test_unknown_level_falls_back_to_info(restore_levels):
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)

    with root_handlers() as root:
        root.setLevel(logging.NOTSET)

        assert setup_logging("chatty") is True

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


def test_existing_handlers_are_left_alone(restore_levels):
    existing = logging.NullHandler()

    with root_handlers(existing) as root:
        root.setLevel(logging.ERROR)

        assert setup_logging("debug") is False

        assert root.handlers == [existing]
        assert root.level == logging.ERROR
