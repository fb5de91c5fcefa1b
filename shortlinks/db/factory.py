"""
Database adapter selection.

The adapter is picked from the dialect part of the connection URL, so
switching from SQLite to PostgreSQL only means changing DATABASE_URL.
"""

from sqlalchemy.engine import make_url

from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.postgres_adapter import PostgreSQLAdapter
from shortlinks.db.sqlite_adapter import SQLiteAdapter

_ADAPTERS: dict[str, type[DatabaseAdapter]] = {
    "sqlite": SQLiteAdapter,
    "postgresql": PostgreSQLAdapter,
}


def get_database_adapter(database_url: str) -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a connection URL.

    Args:
        database_url: SQLAlchemy URL, e.g. "sqlite+aiosqlite:///./shortlinks.db"

    Returns:
        DatabaseAdapter instance

    Raises:
        ValueError: If no adapter exists for the URL's dialect
    """
    backend = make_url(database_url).get_backend_name()
    try:
        adapter_class = _ADAPTERS[backend]
    except KeyError:
        raise ValueError(f"Unsupported database backend: {backend}") from None
    return adapter_class()
