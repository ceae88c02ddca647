"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (health and the portfolio bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Storage and file-hosting adapters selected by settings

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from artfolio.core.config import Settings, settings
from artfolio.infrastructure.portfolio.storage_factory import build_file_host, build_storage
from artfolio.interfaces.health import router as health_router
from artfolio.interfaces.portfolio.router import router as portfolio_router
from artfolio.shared.errors.handlers import register_error_handlers
from artfolio.shared.logging import configure_logging
from artfolio.shared.security.headers import SecurityHeadersMiddleware
from artfolio.shared.security.rate_limiting import (
    configure_rate_limits,
    limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: release storage and file-host clients on shutdown."""
    logger.info(
        "%s %s started with %s storage",
        app.state.settings.project_name,
        app.state.settings.version,
        app.state.storage.name,
    )
    yield
    app.state.storage.close()
    app.state.file_host.close()
    logger.info("Storage closed")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware, and
    builds the storage adapter once for the whole process.
    This is the composition root of the application.

    Args:
        app_settings: Settings to use instead of the environment, mainly
            for tests.

    Returns:
        A fully configured FastAPI application instance.
    """
    app_settings = app_settings or settings
    configure_logging(level=app_settings.log_level, sql_echo=app_settings.sql_echo)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    # --- Adapters ---
    app.state.settings = app_settings
    app.state.storage = build_storage(app_settings)
    app.state.file_host = build_file_host(app_settings)

    # --- Rate Limiting ---
    configure_rate_limits(app_settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(portfolio_router, prefix="/api/v1")

    # --- Local uploads ---
    if (
        app_settings.file_hosting_backend == "local"
        and app_settings.public_upload_base_url.startswith("/")
    ):
        app.mount(
            app_settings.public_upload_base_url,
            StaticFiles(directory=app_settings.upload_dir, check_dir=False),
            name="uploads",
        )

    return app


app = create_app()
