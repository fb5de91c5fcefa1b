"""Shared pytest fixtures: a throwaway SQLite database per test, a registry
bound to it, and an HTTP client with the registry dependency overridden."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel

from shortlinks.core.registry_manager import get_link_registry
from shortlinks.db import models  # noqa: F401
from shortlinks.db.session import make_session_maker
from shortlinks.db.sqlite_adapter import SQLiteAdapter
from shortlinks.main import app
from shortlinks.services.link_registry import LinkRegistry

RESERVED_CODES = ["api", "code", "docs", "healthz", "redoc"]


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    engine = SQLiteAdapter().create_engine(f"sqlite+aiosqlite:///{tmp_path / 'links.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker:
    return make_session_maker(db_engine)


@pytest.fixture
def registry(session_maker: async_sessionmaker) -> LinkRegistry:
    return LinkRegistry(
        session_maker,
        adapter=SQLiteAdapter(),
        max_generation_attempts=5,
        reserved_codes=RESERVED_CODES,
    )


@pytest_asyncio.fixture
async def broken_registry(tmp_path) -> AsyncGenerator[LinkRegistry, None]:
    """A registry whose database file cannot be opened."""
    engine = SQLiteAdapter().create_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'links.db'}"
    )
    yield LinkRegistry(make_session_maker(engine), adapter=SQLiteAdapter())
    await engine.dispose()


@pytest_asyncio.fixture
async def client(registry: LinkRegistry) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_link_registry] = lambda: registry

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
