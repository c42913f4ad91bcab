"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so that
the service can run locally against an SQLite file without any setup.
In a production deployment override these via environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "NR Permitting Records")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database file.  A relative path is resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "nr_permitting.db")

    # Seconds a connection waits on a locked database before failing.
    db_timeout_seconds: float = float(os.getenv("DB_CONNECTION_TIMEOUT", "30"))

    # Retry policy for transient storage failures.  Attempts include the
    # first call; the delay before attempt ``n + 1`` is
    # ``db_retry_base_delay * 2 ** (n - 1)`` seconds.
    db_retry_attempts: int = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
    db_retry_base_delay: float = float(os.getenv("DB_RETRY_BASE_DELAY", "1.0"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
