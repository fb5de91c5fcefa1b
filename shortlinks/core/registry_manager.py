"""
Link Registry Manager

This module owns the process-wide LinkRegistry instance.
The registry is built once per application instance on startup and
shared across requests; it is stateless, so sharing is safe.

Design:
- Initialized on application startup (tables are created first when
  CREATE_TABLES_ON_STARTUP is set)
- Built lazily on first use if startup did not run
- Endpoints receive it through the get_link_registry dependency, which
  tests override with a registry bound to their own database
"""

import logging
from typing import Optional

from shortlinks.core.setting import settings
from shortlinks.db.session import async_session_maker, create_tables, db_adapter, dispose_engine
from shortlinks.services.link_registry import LinkRegistry

logger = logging.getLogger(__name__)

_registry: Optional[LinkRegistry] = None


def build_registry() -> LinkRegistry:
    """Create a LinkRegistry bound to the application database."""
    return LinkRegistry(
        async_session_maker,
        adapter=db_adapter,
        max_generation_attempts=settings.CODE_GENERATION_ATTEMPTS,
        reserved_codes=settings.RESERVED_CODES,
    )


def get_link_registry() -> LinkRegistry:
    """
    FastAPI dependency returning the shared registry.

    Returns:
        The LinkRegistry instance (created on first call if needed)
    """
    global _registry

    if _registry is None:
        _registry = build_registry()
    return _registry


async def initialize_registry() -> None:
    """Prepare the database and build the shared registry."""
    global _registry

    if _registry is not None:
        logger.warning("Link registry already initialized")
        return

    if settings.CREATE_TABLES_ON_STARTUP:
        await create_tables()
        logger.info("Database tables ready")

    _registry = build_registry()
    logger.info(
        f"Link registry initialized: "
        f"backend={db_adapter.get_dialect_name()}, "
        f"generation_attempts={settings.CODE_GENERATION_ATTEMPTS}"
    )


async def shutdown_registry() -> None:
    """Drop the registry and release database connections."""
    global _registry

    _registry = None
    await dispose_engine()
    logger.info("Database engine disposed")
