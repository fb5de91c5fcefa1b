"""Tests for database adapter selection and integrity error classification."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import NullPool

from shortlinks.db import get_database_adapter
from shortlinks.db.postgres_adapter import PostgreSQLAdapter
from shortlinks.db.sqlite_adapter import SQLiteAdapter


class FakeDriverError(Exception):
    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


def integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO links ...", {}, orig)


class TestAdapterFactory:

    def test_sqlite(self):
        adapter = get_database_adapter("sqlite+aiosqlite:///./links.db")
        assert isinstance(adapter, SQLiteAdapter)
        assert adapter.get_dialect_name() == "sqlite"
        assert adapter.get_pool_class() is NullPool

    def test_postgresql(self):
        adapter = get_database_adapter("postgresql+asyncpg://user:pw@localhost/links")
        assert isinstance(adapter, PostgreSQLAdapter)
        assert adapter.get_dialect_name() == "postgresql"
        assert adapter.get_engine_kwargs()["pool_pre_ping"] is True

    def test_unsupported_backend(self):
        with pytest.raises(ValueError):
            get_database_adapter("mysql+aiomysql://user:pw@localhost/links")


class TestUniqueViolation:

    def test_sqlite_unique_violation(self):
        error = integrity_error(FakeDriverError("UNIQUE constraint failed: links.code"))
        assert SQLiteAdapter().is_unique_violation(error, "links.code")

    def test_sqlite_other_integrity_error(self):
        error = integrity_error(FakeDriverError("NOT NULL constraint failed: links.target_url"))
        assert not SQLiteAdapter().is_unique_violation(error, "links.code")

    def test_postgres_unique_violation(self):
        error = integrity_error(FakeDriverError(
            'duplicate key value violates unique constraint "ix_links_code"',
            sqlstate="23505",
        ))
        assert PostgreSQLAdapter().is_unique_violation(error, "links.code")

    def test_postgres_other_integrity_error(self):
        error = integrity_error(FakeDriverError(
            'null value in column "target_url" violates not-null constraint',
            sqlstate="23502",
        ))
        assert not PostgreSQLAdapter().is_unique_violation(error, "links.code")
