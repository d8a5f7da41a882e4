"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from bizdocs.database.sqlalchemy_db import SQLAlchemyDatabase
from bizdocs.domain.errors import ValidationError

DEFAULT_TIMEOUT_SECONDS = 5.0


def _timeout_from_env() -> float:
    raw = os.environ.get("BIZDOCS_DB_TIMEOUT")
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        raise ValidationError(f"BIZDOCS_DB_TIMEOUT must be a number of seconds, got '{raw}'")
    if timeout <= 0:
        raise ValidationError(f"BIZDOCS_DB_TIMEOUT must be positive, got '{raw}'")
    return timeout


def create_sqlite_database(
    database_path: Optional[str] = None, timeout: Optional[float] = None
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks BIZDOCS_DB_PATH
            environment variable, then defaults to ~/.bizdocs/bizdocs.db
        timeout: Seconds to wait on a locked database. If None, checks
            BIZDOCS_DB_TIMEOUT, then defaults to 5 seconds

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("BIZDOCS_DB_PATH")

    if database_path is None:
        # Default to ~/.bizdocs/bizdocs.db
        home = Path.home()
        db_dir = home / ".bizdocs"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "bizdocs.db")

    if timeout is None:
        timeout = _timeout_from_env()

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url, timeout=timeout)
