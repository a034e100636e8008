"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with no configuration at all.  In a production
deployment you should override these via environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Character Ranking Admin API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module; ``:memory:`` keeps
    # everything in RAM for the lifetime of the process.
    database_url: str = os.getenv("DATABASE_URL", "characters.db")

    # Comma‑separated list of origins allowed to call the API from a
    # browser, e.g. CORS_ORIGIN="http://localhost:3001,https://admin.example.com".
    cors_origins: List[str] = field(
        default_factory=lambda: _split_origins(os.getenv("CORS_ORIGIN", "http://localhost:3001"))
    )
    cors_credentials: bool = os.getenv("CORS_CREDENTIALS", "true").lower() in {"1", "true", "yes"}

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
