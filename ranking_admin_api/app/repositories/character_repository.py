"""
Record store for character rows.

``CharacterStore`` is the contract the service layer depends on;
``SQLiteCharacterStore`` implements it on top of a single SQLite
connection that is opened when the application starts and closed
when it stops.

All queries use parameterized statements.  Driver failures are
re-raised as ``StorageError`` so callers never need to know which
database engine sits underneath.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ranking_admin_api.app.core.db import get_connection, init_db
from ranking_admin_api.app.schemas.character import CharacterCreate, CharacterRead

logger = logging.getLogger(__name__)

SEARCH_RESULT_LIMIT = 50

_COLUMNS = "user_id, nickname, level, job, job_code, meso, play_time, exp, created_at, updated_at"
# A record without exp ranks below every record of the same level that has
# one (NULLS LAST).  SQLite orders NULL lowest, so DESC gives this without
# an explicit NULLS clause; PostgreSQL would need "exp DESC NULLS LAST".
_RANK_ORDER = "ORDER BY level DESC, exp DESC, id ASC"


class StorageError(Exception):
    """Raised when the underlying database fails."""


class DuplicateRecordError(StorageError):
    """Raised when inserting a ``user_id`` that already exists."""


class CharacterStore(ABC):
    """Query operations the ranking service needs from storage."""

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def find_page(self, offset: int, limit: int) -> List[CharacterRead]:
        """Return ``limit`` records after skipping ``offset``, in rank order."""

    @abstractmethod
    def find_by_keyword_substring(self, keyword: str, limit: int = SEARCH_RESULT_LIMIT) -> List[CharacterRead]:
        """Return records whose ``user_id`` or ``nickname`` contains ``keyword``.

        Matching ignores case and the result is in rank order.
        """

    @abstractmethod
    def find_by_identifier(self, user_id: str) -> Optional[CharacterRead]:
        ...

    @abstractmethod
    def delete_by_identifier(self, user_id: str) -> bool:
        """Delete a record, returning ``True`` if a row was removed."""

    @abstractmethod
    def insert(self, record: CharacterCreate) -> None:
        ...

    def close(self) -> None:
        pass


class SQLiteCharacterStore(CharacterStore):
    """``CharacterStore`` backed by the ``characters`` table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @classmethod
    def open(cls, database_url: str) -> "SQLiteCharacterStore":
        """Connect to ``database_url`` and bring the schema up to date."""
        with _translate_errors():
            conn = get_connection(database_url)
            try:
                version = init_db(conn)
            except Exception:
                conn.close()
                raise
        logger.info("Opened character store %s (schema version %s)", database_url, version)
        return cls(conn)

    def close(self) -> None:
        self._conn.close()

    def count(self) -> int:
        with _translate_errors():
            row = self._conn.execute("SELECT COUNT(*) AS count FROM characters").fetchone()
        return row["count"]

    def find_page(self, offset: int, limit: int) -> List[CharacterRead]:
        with _translate_errors():
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM characters {_RANK_ORDER} LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [self._row_to_character(row) for row in rows]

    def find_by_keyword_substring(self, keyword: str, limit: int = SEARCH_RESULT_LIMIT) -> List[CharacterRead]:
        # instr() instead of LIKE so that '%' and '_' in the keyword match literally.
        needle = keyword.casefold()
        with _translate_errors():
            rows = self._conn.execute(
                f"""
                SELECT {_COLUMNS} FROM characters
                WHERE instr(casefold(user_id), ?) > 0 OR instr(casefold(nickname), ?) > 0
                {_RANK_ORDER}
                LIMIT ?
                """,
                (needle, needle, limit),
            ).fetchall()
        return [self._row_to_character(row) for row in rows]

    def find_by_identifier(self, user_id: str) -> Optional[CharacterRead]:
        with _translate_errors():
            row = self._conn.execute(
                f"SELECT {_COLUMNS} FROM characters WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            return None
        return self._row_to_character(row)

    def delete_by_identifier(self, user_id: str) -> bool:
        with _translate_errors():
            try:
                cursor = self._conn.execute("DELETE FROM characters WHERE user_id = ?", (user_id,))
                self._conn.commit()
            except sqlite3.Error:
                self._conn.rollback()
                raise
        return cursor.rowcount > 0

    def insert(self, record: CharacterCreate) -> None:
        with _translate_errors():
            try:
                self._conn.execute(
                    """
                    INSERT INTO characters (user_id, nickname, level, job, job_code, meso, play_time, exp)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.user_id,
                        record.nickname,
                        record.level,
                        record.job,
                        record.job_code,
                        record.meso,
                        record.play_time,
                        record.exp,
                    ),
                )
                self._conn.commit()
            except sqlite3.IntegrityError as exc:
                self._conn.rollback()
                if "UNIQUE" in str(exc):
                    raise DuplicateRecordError(f"Character {record.user_id!r} already exists") from exc
                raise
            except sqlite3.Error:
                self._conn.rollback()
                raise

    @staticmethod
    def _row_to_character(row: sqlite3.Row) -> CharacterRead:
        """Convert a database row to a CharacterRead schema instance."""
        return CharacterRead(
            user_id=row["user_id"],
            nickname=row["nickname"],
            level=row["level"],
            job=row["job"],
            job_code=row["job_code"],
            meso=row["meso"],
            play_time=row["play_time"],
            exp=row["exp"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise StorageError(str(exc)) from exc
