"""Redirect endpoint for short links."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from shortlinks.api.endpoints import not_found, server_error
from shortlinks.core.exceptions import StorageUnavailableError
from shortlinks.core.registry_manager import get_link_registry
from shortlinks.core.validators import is_valid_code
from shortlinks.services.link_registry import LinkRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Redirect"])


@router.get(
    "/{code}",
    status_code=status.HTTP_302_FOUND,
    responses={404: {"description": "Unknown code"}},
    summary="Redirect to the target URL",
    description="Looks up a short code, counts the visit and redirects to its target"
)
async def redirect_to_target(
    code: str,
    registry: LinkRegistry = Depends(get_link_registry)
) -> RedirectResponse:
    """
    Redirect a visitor.

    Malformed and reserved codes can never exist, so they are answered
    with 404 without touching the database.

    Raises:
        HTTPException 404: If the code is unknown
        HTTPException 500: If the database is unavailable
    """
    if not is_valid_code(code) or registry.is_reserved(code):
        raise not_found(code)

    try:
        target_url = await registry.resolve(code)
    except StorageUnavailableError:
        raise server_error()

    if target_url is None:
        raise not_found(code)

    logger.debug(f"Redirecting '{code}' -> {target_url}")
    return RedirectResponse(url=target_url, status_code=status.HTTP_302_FOUND)
