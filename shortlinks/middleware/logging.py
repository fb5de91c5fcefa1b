"""
Logging Setup and Request Logging Middleware

- configure_logging(): one-time root logger setup from settings
- LoggingMiddleware: one access line per request with method, path,
  status code, processing time and client IP

Server errors are logged at WARNING so they stand out from normal
traffic; the cause itself is logged by the registry with a traceback.
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("shortlinks.access")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    X-Forwarded-For can contain a chain (client, proxy1, proxy2); the
    first entry is the original client.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        # Format: METHOD PATH STATUS_CODE PROCESS_TIME_MS CLIENT_IP
        logger.log(
            level,
            f"{request.method} {request.url.path} "
            f"{response.status_code} {elapsed_ms:.2f}ms "
            f"IP:{get_client_ip(request)}"
        )

        response.headers["X-Process-Time"] = f"{elapsed_ms / 1000:.6f}"
        return response


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
