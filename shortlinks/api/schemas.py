"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.

The create request takes plain strings on purpose: URL and code checks
belong to the link registry, which reports them as 400 errors with the
same messages whatever the caller.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class LinkCreate(BaseModel):
    """Request model for link creation."""
    url: str = Field(..., description="The target URL to redirect to")
    code: Optional[str] = Field(
        default=None,
        description="Optional custom code (6-8 letters/numbers); generated when omitted"
    )


class LinkResponse(BaseModel):
    """A link with its visit statistics."""
    id: int
    code: str = Field(..., description="The short code")
    target_url: str = Field(..., description="The URL visitors are redirected to")
    short_url: str = Field(..., description="The complete short URL")
    created_at: datetime
    total_clicks: int
    last_clicked_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    ok: bool
    version: str


class ErrorResponse(BaseModel):
    detail: str
