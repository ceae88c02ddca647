"""
Health check router.

Provides a simple health endpoint for liveness and readiness checks.
No business logic. Returns application status, version and the
storage backend in use.
"""

from fastapi import APIRouter, Request

from artfolio.interfaces.portfolio.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status, version and storage backend.",
)
def health_check(request: Request) -> HealthResponse:
    """Return current application health status."""
    state = request.app.state
    return HealthResponse(
        status="ok",
        version=state.settings.version,
        storage_backend=state.storage.name,
    )
