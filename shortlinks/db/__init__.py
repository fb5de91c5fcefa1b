"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: backend-specific implementations
- get_database_adapter: picks the adapter from a connection URL

Engine and session factory live in shortlinks.db.session, which is only
imported by the application wiring so tests can build their own.
"""

from shortlinks.db.factory import get_database_adapter
from shortlinks.db.interface import DatabaseAdapter

__all__ = [
    "DatabaseAdapter",
    "get_database_adapter",
]
