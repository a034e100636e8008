"""
SQLite database integration and simple migration system.

This module provides functions for opening a database connection
(``get_connection``) and applying migrations (``init_db``).  It uses
SQLite as a lightweight embedded database; to switch to another DBMS
you would replace the connection logic and adapt SQL syntax
accordingly.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS characters (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL UNIQUE CHECK (length(user_id) <= 30),
            nickname TEXT NOT NULL,
            level INTEGER NOT NULL DEFAULT 1 CHECK (level >= 1),
            job TEXT,
            job_code INTEGER,
            meso INTEGER,
            play_time INTEGER,
            exp INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
    # Migration 2: index backing the ranked scan
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_characters_rank ON characters (level DESC, exp DESC);
        """,
    ),
]


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and ``:memory:`` are used directly.  Relative paths
    are resolved against the project root.
    """
    if database_url == MEMORY_DATABASE or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def get_connection(database_url: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  A ``casefold`` SQL function is registered because SQLite's
    own ``lower``/``LIKE`` only fold ASCII letters.

    The connection may be used from a thread other than the one that
    created it: FastAPI and its test client run the event loop in a
    worker thread.
    """
    db_path = get_database_path(database_url)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    return conn


def init_db(conn: sqlite3.Connection) -> int:
    """Apply pending migrations and return the resulting schema version.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a new migration, append it with an
    incremented version number.
    """
    cursor = conn.cursor()
    try:
        cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                logger.info("Applied migration %s", version)
                current_version = version
        conn.commit()
    finally:
        cursor.close()
    return current_version
