"""Health check endpoints for monitoring."""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from prepwise.config.settings import settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str
    generation: str


def check_generation() -> str:
    """Report whether the generation service has credentials."""
    if not settings.generation_configured:
        return "not_configured"
    return "configured"


@router.get("", response_model=HealthResponse)
@router.get("/", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    The service is degraded when evaluations cannot reach the generator.
    """
    generation_status = check_generation()

    if generation_status == "configured":
        overall_status = "healthy"
    else:
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        generation=generation_status,
    )


@router.get("/live")
async def liveness_check() -> dict:
    """
    Kubernetes liveness probe.

    Returns 200 if service process is alive.
    """
    return {"alive": True}
