"""Database layer for bizdocs application."""

from bizdocs.database.base import Database
from bizdocs.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
