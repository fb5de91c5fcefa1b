"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

Key characteristics:
- File-based (single .db file)
- No server required
- Single writer at a time (file locking)

Concurrent writers queue on the file lock. The driver busy timeout
decides how long a writer waits before giving up with
"database is locked".
"""

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import NullPool

from shortlinks.db.interface import DatabaseAdapter

BUSY_TIMEOUT_SECONDS = 30


class SQLiteAdapter(DatabaseAdapter):
    """SQLite database adapter implementation."""

    def get_pool_class(self) -> type[NullPool]:
        """
        SQLite uses NullPool: a file-based database does not benefit from
        connection pooling, and a fresh connection per session keeps
        aiosqlite worker threads short-lived.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False,
            "timeout": BUSY_TIMEOUT_SECONDS,
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False
        }

    def is_unique_violation(self, error: IntegrityError, column: str) -> bool:
        """
        SQLite reports duplicates as "UNIQUE constraint failed: links.code".
        """
        message = str(error.orig)
        return "UNIQUE constraint failed" in message and column in message

    def get_dialect_name(self) -> str:
        return "sqlite"
