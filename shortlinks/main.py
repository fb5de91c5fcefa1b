"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes (link API first, the catch-all redirect last)
- Middleware (logging, CORS)
- Startup/shutdown of the link registry and database engine

Run with:
    uvicorn shortlinks.main:app
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shortlinks.api import endpoints, redirect
from shortlinks.core.registry_manager import initialize_registry, shutdown_registry
from shortlinks.core.setting import settings
from shortlinks.middleware.logging import add_logging_middleware, configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Short Link Service",
    description="Maps short codes to target URLs and counts redirects",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

add_logging_middleware(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(endpoints.router, tags=["Links"])
# Must stay last: "/{code}" matches every single-segment path
app.include_router(redirect.router)


@app.on_event("startup")
async def startup_event():
    """Create tables (if configured) and build the link registry."""
    await initialize_registry()


@app.on_event("shutdown")
async def shutdown_event():
    """Release database connections."""
    await shutdown_registry()
