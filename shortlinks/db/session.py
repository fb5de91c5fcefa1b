"""
Database Session Management

This module builds the process-wide async engine and session factory from
settings. The session factory is the storage handle handed to the link
registry; nothing else in the service talks to the engine directly.

- Database abstraction: the adapter is chosen from DATABASE_URL
- Connection pooling: configured per database type by the adapter
- Sessions do not expire objects on commit, so a Link returned by the
  registry stays readable after its transaction has ended
"""

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shortlinks.core.setting import settings
from shortlinks.db import models  # noqa: F401  (registers tables on SQLModel.metadata)
from shortlinks.db.factory import get_database_adapter

db_adapter = get_database_adapter(settings.DATABASE_URL)

engine = db_adapter.create_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
)


def make_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    """Create a session factory configured the way the registry expects."""
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,  # Links are read after commit
        autoflush=False,
    )


async_session_maker = make_session_maker(engine)


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create missing tables. Alembic is the alternative for managed schemas."""
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def dispose_engine(bind: AsyncEngine = engine) -> None:
    await bind.dispose()
