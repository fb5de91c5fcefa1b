"""
Database Models for the Short Link Service

This module defines the SQLModel database schema for:
- Link: Stores the mapping between a short code and its target URL,
  together with the visit counter

Design Decisions:
- Unique index on code: the database, not the application, guarantees
  that two concurrent creations cannot both win the same code
- total_clicks lives on the row and is only ever changed by a single
  UPDATE ... SET total_clicks = total_clicks + 1 statement
- Index on created_at for newest-first listing
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.types import TypeDecorator
from sqlmodel import Column, Field, SQLModel

from shortlinks.core.validators import MAX_CODE_LENGTH


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamps on every backend.

    SQLite has no timezone storage and hands back naive values; those are
    stored and read as UTC. Aware values are normalized to UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Link(SQLModel, table=True):
    """
    A short code and the URL it redirects to.

    Fields:
    - id: Auto-incrementing primary key, opaque to callers
    - code: Unique short code (6-8 characters, [A-Za-z0-9])
    - target_url: The URL visitors are redirected to
    - created_at: Timestamp when the link was created
    - total_clicks: Number of successful redirects
    - last_clicked_at: Timestamp of the latest redirect, None until the first one

    code and target_url never change after creation.
    """
    __tablename__ = "links"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(
        sa_column=Column(String(MAX_CODE_LENGTH), nullable=False, unique=True, index=True),
        max_length=MAX_CODE_LENGTH
    )
    target_url: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UTCDateTime(), nullable=False, index=True)
    )
    total_clicks: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0, server_default="0")
    )
    last_clicked_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(UTCDateTime(), nullable=True)
    )
