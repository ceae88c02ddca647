"""
Centralized error handlers for FastAPI.

Maps domain and storage errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from artfolio.domain.portfolio.errors import (
    EmptyUpdateError,
    FileHostingError,
    InvalidEventError,
    InvalidImageError,
    InvalidUpdateError,
    NotAuthenticatedError,
    PortfolioDomainError,
    PortfolioNotFoundError,
    SlugConflictError,
    StorageConflictError,
    StorageError,
    StorageUnavailableError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

HTTP_401 = 401
HTTP_404 = 404
HTTP_409 = 409
HTTP_422 = 422
HTTP_500 = 500
HTTP_502 = 502
HTTP_503 = 503


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Handlers are looked up by exception class hierarchy, so specific
    errors win over their base classes.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(NotAuthenticatedError)
    async def handle_not_authenticated(
        _request: Request, exc: NotAuthenticatedError
    ) -> JSONResponse:
        """Handle requests that need a current user and have none."""
        return _error_response(HTTP_401, "Not authenticated")

    @app.exception_handler(PortfolioNotFoundError)
    async def handle_portfolio_not_found(
        _request: Request, exc: PortfolioNotFoundError
    ) -> JSONResponse:
        """Handle unresolvable portfolio identifiers."""
        logger.info("Portfolio not found: %s", exc.identifier)
        return _error_response(HTTP_404, "Portfolio not found")

    @app.exception_handler(UserNotFoundError)
    async def handle_user_not_found(
        _request: Request, exc: UserNotFoundError
    ) -> JSONResponse:
        """Handle missing user rows."""
        logger.warning("User not found: %s", exc.user_id)
        return _error_response(HTTP_404, "User not found")

    @app.exception_handler(SlugConflictError)
    async def handle_slug_conflict(
        _request: Request, exc: SlugConflictError
    ) -> JSONResponse:
        """Handle slugs already taken by another portfolio."""
        logger.warning("Slug conflict: %s", exc.slug)
        return _error_response(HTTP_409, "Slug already in use", exc.slug)

    @app.exception_handler(InvalidImageError)
    async def handle_invalid_image(
        _request: Request, exc: InvalidImageError
    ) -> JSONResponse:
        """Handle images that cannot be saved as requested."""
        logger.warning("Invalid image: %s", exc.reason)
        return _error_response(HTTP_422, "Invalid image", exc.reason)

    @app.exception_handler(InvalidEventError)
    async def handle_invalid_event(
        _request: Request, exc: InvalidEventError
    ) -> JSONResponse:
        """Handle events missing required fields."""
        logger.warning("Invalid event: %s", exc.reason)
        return _error_response(HTTP_422, "Invalid event", exc.reason)

    @app.exception_handler(InvalidUpdateError)
    async def handle_invalid_update(
        _request: Request, exc: InvalidUpdateError
    ) -> JSONResponse:
        """Handle sparse updates naming read-only or unknown fields."""
        logger.warning("Invalid update fields: %s", exc.fields)
        return _error_response(HTTP_422, "Invalid update", exc.message)

    @app.exception_handler(EmptyUpdateError)
    async def handle_empty_update(
        _request: Request, exc: EmptyUpdateError
    ) -> JSONResponse:
        """Handle updates carrying no changes."""
        return _error_response(HTTP_422, "No fields to update")

    @app.exception_handler(FileHostingError)
    async def handle_file_hosting(
        _request: Request, exc: FileHostingError
    ) -> JSONResponse:
        """Handle failures of the external file host."""
        logger.error("File hosting failed for %s: %s", exc.filename, exc.reason)
        return _error_response(HTTP_502, "File upload failed")

    @app.exception_handler(PortfolioDomainError)
    async def handle_portfolio_domain(
        _request: Request, exc: PortfolioDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled portfolio domain errors."""
        logger.error("Unhandled portfolio domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(StorageConflictError)
    async def handle_storage_conflict(
        _request: Request, exc: StorageConflictError
    ) -> JSONResponse:
        """Handle constraint violations not mapped to a domain error."""
        logger.warning("Storage conflict on %s: %s", exc.table, exc.detail)
        return _error_response(HTTP_409, "Conflict")

    @app.exception_handler(StorageUnavailableError)
    async def handle_storage_unavailable(
        _request: Request, exc: StorageUnavailableError
    ) -> JSONResponse:
        """Handle an unreachable storage backend."""
        logger.error("Storage unavailable: %s", exc.reason)
        return _error_response(HTTP_503, "Storage unavailable")

    @app.exception_handler(StorageError)
    async def handle_storage(
        _request: Request, exc: StorageError
    ) -> JSONResponse:
        """Handle opaque storage failures."""
        logger.error("Storage error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
