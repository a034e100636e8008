"""Lenient integer parsing for query strings and imported spreadsheet cells."""

import re
from typing import Optional

_LEADING_INT = re.compile(r"^[+-]?\d+")


def parse_leading_int(value: Optional[str]) -> Optional[int]:
    """Parse the integer at the start of ``value``.

    Surrounding whitespace is ignored and anything after the digits is
    dropped, so ``"2.5"`` and ``"2abc"`` both give 2.  Returns ``None``
    when ``value`` does not start with an integer.

    >>> parse_leading_int(" 12.7 ")
    12
    >>> parse_leading_int("abc") is None
    True
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value.strip())
    return int(match.group()) if match else None
