"""
Link Registry

The only writer of Link rows. Handles:
- Creating links with a caller-supplied or generated code
- Resolving a code into its target URL while counting the visit
- Simple reads (get, list) and hard deletes

Design Decisions:
- Storage handle is injected: the registry receives a session factory
  and the database adapter, it never reaches for a global engine
- One session (one transaction) per operation, no in-memory cache
- Code uniqueness comes from the unique index on links.code. The insert
  is attempted directly and a unique violation means the code is taken;
  there is no SELECT-then-INSERT window
- A visit is a single UPDATE ... RETURNING statement, so concurrent
  redirects of the same code cannot lose increments and a concurrent
  delete either happens before (no redirect, no increment) or after
  (redirect and increment both recorded)
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from shortlinks.core.exceptions import (
    CodeConflictError,
    InvalidCodeError,
    InvalidURLError,
    StorageUnavailableError,
)
from shortlinks.core.validators import generate_code, is_valid_code, is_valid_url
from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.models import Link

logger = logging.getLogger(__name__)

CODE_COLUMN = "links.code"
DEFAULT_GENERATION_ATTEMPTS = 5


def _retrieve_visit_error(visit: asyncio.Future) -> None:
    """
    Collect the outcome of a visit whose caller went away.

    Failures were already logged by the registry; retrieving them keeps
    asyncio from reporting "Task exception was never retrieved".
    """
    if not visit.cancelled():
        visit.exception()


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so a search term matches literally."""
    return (
        value.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )


class LinkRegistry:
    """
    Create, resolve, read and delete short links.

    Safe to share between concurrent requests: it holds no mutable state,
    every call opens its own session from the injected factory.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker,
        adapter: DatabaseAdapter,
        max_generation_attempts: int = DEFAULT_GENERATION_ATTEMPTS,
        reserved_codes: Iterable[str] = (),
        code_generator: Callable[[], str] = generate_code,
    ):
        """
        Initialize the registry.

        Args:
            session_maker: Factory for async sessions (the storage handle)
            adapter: Database adapter, used to classify integrity errors
            max_generation_attempts: Candidates to try for a generated code
            reserved_codes: Codes that can never be created (router paths)
            code_generator: Produces candidate codes
        """
        if max_generation_attempts < 1:
            raise ValueError("max_generation_attempts must be at least 1")

        self.session_maker = session_maker
        self.adapter = adapter
        self.max_generation_attempts = max_generation_attempts
        self.reserved_codes = frozenset(code.lower() for code in reserved_codes)
        self.code_generator = code_generator

    def is_reserved(self, code: str) -> bool:
        return code.lower() in self.reserved_codes

    async def create(self, target_url: str, code: Optional[str] = None) -> Link:
        """
        Create a new link.

        Args:
            target_url: Absolute http(s) URL to redirect to
            code: Requested short code, or None to generate one

        Returns:
            The created Link (total_clicks=0, last_clicked_at=None)

        Raises:
            InvalidURLError: If target_url is not a valid absolute URL
            InvalidCodeError: If code is malformed or reserved
            CodeConflictError: If code is taken, or every generated
                candidate collided
            StorageUnavailableError: If the database operation fails
        """
        if not is_valid_url(target_url):
            raise InvalidURLError(target_url)

        if code is not None:
            if not is_valid_code(code):
                raise InvalidCodeError(code)
            if self.is_reserved(code):
                raise InvalidCodeError(code, reason="Code is reserved")
            # A caller's code is never altered or retried
            return await self._insert(code, target_url)

        candidate = ""
        for attempt in range(1, self.max_generation_attempts + 1):
            candidate = self.code_generator()
            if self.is_reserved(candidate):
                continue
            try:
                return await self._insert(candidate, target_url)
            except CodeConflictError:
                logger.warning(
                    f"Generated code collision on '{candidate}' "
                    f"(attempt {attempt}/{self.max_generation_attempts})"
                )

        logger.error(
            f"Could not allocate a free code after {self.max_generation_attempts} attempts"
        )
        raise CodeConflictError(
            candidate,
            generated=True,
            attempts=self.max_generation_attempts
        )

    async def _insert(self, code: str, target_url: str) -> Link:
        link = Link(code=code, target_url=target_url, total_clicks=0)

        async with self.session_maker() as session:
            try:
                session.add(link)
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if self.adapter.is_unique_violation(e, CODE_COLUMN):
                    raise CodeConflictError(code) from e
                raise self._storage_error(f"create '{code}'", e) from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise self._storage_error(f"create '{code}'", e) from e

        logger.info(f"Created link '{code}' -> {target_url}")
        return link

    async def resolve(self, code: str) -> Optional[str]:
        """
        Record a visit and return the target URL.

        The increment and the read of target_url are one statement. Once
        started, the statement is shielded from cancellation of the
        caller so a dispatched visit is never dropped.

        Args:
            code: The short code that was visited

        Returns:
            The target URL, or None if the code does not exist (nothing
            is written in that case)

        Raises:
            StorageUnavailableError: If the database operation fails
        """
        visit = asyncio.ensure_future(self._record_visit(code))
        visit.add_done_callback(_retrieve_visit_error)
        return await asyncio.shield(visit)

    async def _record_visit(self, code: str) -> Optional[str]:
        statement = (
            update(Link)
            .where(Link.code == code)
            .values(
                total_clicks=Link.total_clicks + 1,
                last_clicked_at=datetime.now(timezone.utc),
            )
            .returning(Link.target_url)
            .execution_options(synchronize_session=False)
        )

        async with self.session_maker() as session:
            try:
                result = await session.execute(statement)
                target_url = result.scalar_one_or_none()
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise self._storage_error(f"resolve '{code}'", e) from e

        return target_url

    async def get(self, code: str) -> Optional[Link]:
        """Return the link for a code, or None."""
        statement = select(Link).where(Link.code == code)

        async with self.session_maker() as session:
            try:
                result = await session.execute(statement)
                return result.scalar_one_or_none()
            except SQLAlchemyError as e:
                raise self._storage_error(f"get '{code}'", e) from e

    async def list_links(self, query: Optional[str] = None) -> list[Link]:
        """
        List links, newest first.

        Args:
            query: Optional case-insensitive substring matched against
                code and target_url

        Returns:
            Matching links ordered by created_at descending
        """
        statement = select(Link)
        if query:
            pattern = f"%{_escape_like(query)}%"
            statement = statement.where(
                or_(
                    Link.code.ilike(pattern, escape="\\"),
                    Link.target_url.ilike(pattern, escape="\\"),
                )
            )
        statement = statement.order_by(Link.created_at.desc(), Link.id.desc())

        async with self.session_maker() as session:
            try:
                result = await session.execute(statement)
                return list(result.scalars().all())
            except SQLAlchemyError as e:
                raise self._storage_error("list links", e) from e

    async def remove(self, code: str) -> bool:
        """
        Delete a link.

        Returns:
            True if a row was deleted, False if the code did not exist
        """
        statement = (
            delete(Link)
            .where(Link.code == code)
            .execution_options(synchronize_session=False)
        )

        async with self.session_maker() as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise self._storage_error(f"delete '{code}'", e) from e

        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Deleted link '{code}'")
        return deleted

    def _storage_error(self, action: str, error: Exception) -> StorageUnavailableError:
        logger.error(f"Storage failure during {action}: {error}", exc_info=error)
        return StorageUnavailableError(f"failed to {action}", original_error=error)
