"""API endpoints for the PrepWise evaluation service."""

from fastapi import APIRouter

from .evaluations import router as evaluations_router
from .health import router as health_router

# Create main API router
api_router = APIRouter()

api_router.include_router(health_router, prefix="/health", tags=["Health"])
api_router.include_router(evaluations_router, prefix="/interviews", tags=["Evaluations"])

__all__ = ["api_router"]
