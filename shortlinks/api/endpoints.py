"""
FastAPI Endpoints for the Link API

Endpoints only handle:
- Request parsing (Pydantic models)
- Translating registry error kinds into HTTP status codes
- Shaping responses

All business logic lives in the LinkRegistry.

Status codes:
- 400: invalid URL or code
- 404: unknown code
- 409: code already exists
- 500: storage failure (details are logged, never returned)
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from shortlinks.api.schemas import ErrorResponse, HealthResponse, LinkCreate, LinkResponse
from shortlinks.core.exceptions import (
    CodeConflictError,
    InvalidCodeError,
    InvalidURLError,
    LinkNotFoundError,
    StorageUnavailableError,
)
from shortlinks.core.registry_manager import get_link_registry
from shortlinks.core.setting import settings
from shortlinks.db.models import Link
from shortlinks.services.link_registry import LinkRegistry

SERVER_ERROR_DETAIL = "Server error"

router = APIRouter()


def to_response(link: Link) -> LinkResponse:
    """Build the API representation of a link."""
    return LinkResponse(
        id=link.id,
        code=link.code,
        target_url=link.target_url,
        short_url=f"{settings.BASE_URL.rstrip('/')}/{link.code}",
        created_at=link.created_at,
        total_clicks=link.total_clicks,
        last_clicked_at=link.last_clicked_at,
    )


def server_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=SERVER_ERROR_DETAIL
    )


def not_found(code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=str(LinkNotFoundError(code))
    )


@router.get("/healthz", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(ok=True, version=settings.APP_VERSION)


@router.post(
    "/api/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Create a short link",
    description="Takes a target URL and an optional custom code and returns the new link"
)
async def create_link(
    body: LinkCreate,
    registry: LinkRegistry = Depends(get_link_registry)
) -> LinkResponse:
    """
    Create a new short link.

    An empty code is treated as no code, so a generated one is used.
    """
    code = body.code or None

    try:
        link = await registry.create(body.url, code)
    except InvalidURLError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid URL"
        )
    except InvalidCodeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.reason
        )
    except CodeConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Code already exists" if not e.generated else "Could not allocate a free code"
        )
    except StorageUnavailableError:
        raise server_error()

    return to_response(link)


@router.get(
    "/api/links",
    response_model=list[LinkResponse],
    summary="List links",
    description="Returns all links, newest first, optionally filtered by a search term"
)
async def list_links(
    q: Optional[str] = Query(
        default=None,
        description="Case-insensitive substring of the code or target URL"
    ),
    registry: LinkRegistry = Depends(get_link_registry)
) -> list[LinkResponse]:
    try:
        links = await registry.list_links(q)
    except StorageUnavailableError:
        raise server_error()
    return [to_response(link) for link in links]


@router.get(
    "/api/links/{code}",
    response_model=LinkResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a link",
    description="Returns a link and its visit statistics"
)
async def get_link(
    code: str,
    registry: LinkRegistry = Depends(get_link_registry)
) -> LinkResponse:
    try:
        link = await registry.get(code)
    except StorageUnavailableError:
        raise server_error()

    if link is None:
        raise not_found(code)
    return to_response(link)


@router.delete(
    "/api/links/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a link"
)
async def delete_link(
    code: str,
    registry: LinkRegistry = Depends(get_link_registry)
) -> Response:
    try:
        deleted = await registry.remove(code)
    except StorageUnavailableError:
        raise server_error()

    if not deleted:
        raise not_found(code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
