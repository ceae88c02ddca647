"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits.
Upload endpoints get the stricter limit: each call pushes bytes
to the file host and writes rows to storage.

Limits are read on every request from the settings of the most recently
built application, see ``configure_rate_limits``.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from artfolio.core.config import Settings, settings

_active_limits = {
    "default": settings.rate_limit_default,
    "upload": settings.rate_limit_heavy,
}


def configure_rate_limits(app_settings: Settings) -> None:
    """Use the rate limits from ``app_settings``.

    The limiter is shared by the whole process, so when several
    applications are built the last one's limits apply to all of them.
    """
    _active_limits["default"] = app_settings.rate_limit_default
    _active_limits["upload"] = app_settings.rate_limit_heavy


def default_rate_limit() -> str:
    return _active_limits["default"]


def upload_rate_limit() -> str:
    return _active_limits["upload"]


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[default_rate_limit],
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with a clean JSON response.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a clear error message.
    """
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
    )
