"""
Database Abstraction Interface

Backend differences the rest of the service must not care about live
behind DatabaseAdapter:

- how the async engine is built (pool class, driver connect args)
- how the driver reports a duplicate value in a unique column

The link registry relies on the second point to tell "this code is
already taken" apart from every other storage failure.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Base class for database backends.

    Subclasses provide engine settings and integrity error
    classification; register new ones in shortlinks.db.factory.
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Build an AsyncEngine for ``database_url``.

        Keyword arguments override the adapter's engine defaults.
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        pool_class = self.get_pool_class()
        if pool_class is not None:
            engine_kwargs["poolclass"] = pool_class

        return create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """Pool class for the engine, or None for SQLAlchemy's default."""

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Keyword arguments passed through to the DBAPI connect()."""

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Default keyword arguments for create_async_engine()."""

    @abstractmethod
    def is_unique_violation(self, error: IntegrityError, column: str) -> bool:
        """
        Tell whether an IntegrityError is a duplicate value in ``column``.

        Args:
            error: The error raised by SQLAlchemy
            column: Qualified column name, e.g. "links.code"

        Returns:
            True for a duplicate in that column, False for any other
            integrity problem
        """

    @abstractmethod
    def get_dialect_name(self) -> str:
        """SQLAlchemy backend name, e.g. 'sqlite' or 'postgresql'."""
