"""Pytest configuration for the ranking admin API tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from ranking_admin_api.app.core.config import Settings
from ranking_admin_api.app.main import create_app
from ranking_admin_api.app.repositories.character_repository import SQLiteCharacterStore
from ranking_admin_api.app.schemas.character import CharacterCreate


def build_character(user_id: str, level: int = 1, exp=None, nickname: str | None = None, **extra) -> CharacterCreate:
    return CharacterCreate(
        user_id=user_id,
        nickname=nickname or f"nick-{user_id}",
        level=level,
        exp=exp,
        **extra,
    )


@pytest.fixture
def database_url(tmp_path) -> str:
    return str(tmp_path / "characters.db")


@pytest.fixture
def store(database_url):
    store = SQLiteCharacterStore.open(database_url)
    yield store
    store.close()


@pytest.fixture
def add_characters(store):
    """Insert characters given as ``(user_id, level, exp)`` tuples."""

    def _add(*rows):
        for user_id, level, exp in rows:
            store.insert(build_character(user_id, level=level, exp=exp))

    return _add


@pytest.fixture
def app_settings(database_url) -> Settings:
    return Settings(
        database_url=database_url,
        cors_origins=["http://localhost:3001"],
        log_level="WARNING",
    )


@pytest.fixture
def client(app_settings):
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


@pytest.fixture
def api_store(client) -> SQLiteCharacterStore:
    """The store opened by the running test application."""
    return client.app.state.character_store
