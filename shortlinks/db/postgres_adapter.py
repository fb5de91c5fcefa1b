"""
PostgreSQL Database Adapter

Implements the DatabaseAdapter interface for PostgreSQL through asyncpg
(postgresql+asyncpg://...). Install the "postgres" extra to use it.
"""

from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import Pool

from shortlinks.db.interface import DatabaseAdapter

UNIQUE_VIOLATION_SQLSTATE = "23505"


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter implementation."""

    def __init__(self, pool_size: int = 10, max_overflow: int = 20):
        self.pool_size = pool_size
        self.max_overflow = max_overflow

    def get_pool_class(self) -> Optional[type[Pool]]:
        # Default async queue pool
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": True,
        }

    def is_unique_violation(self, error: IntegrityError, column: str) -> bool:
        """
        asyncpg errors carry the SQLSTATE; 23505 is unique_violation.
        The message names the index (ix_links_code) and the key column.
        """
        orig = error.orig
        sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        if sqlstate != UNIQUE_VIOLATION_SQLSTATE:
            return False
        column_name = column.rsplit(".", 1)[-1]
        return column_name in str(orig)

    def get_dialect_name(self) -> str:
        return "postgresql"
