"""
PrepWise Evaluation API - FastAPI Application

Main entry point for the API server.
Run with: uvicorn prepwise.main:app --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prepwise.config.settings import settings
from prepwise.endpoints import api_router
from prepwise.middleware.error_handler import setup_exception_handlers
from prepwise.middleware.logging import LoggingMiddleware, configure_logging

# Configure structured logging
configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info(
        "Starting PrepWise Evaluation API",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        model=settings.CLAUDE_MODEL,
    )

    if not settings.generation_configured:
        logger.warning("ANTHROPIC_API_KEY not set; evaluations will fail until configured")

    yield

    logger.info("Shutting down PrepWise Evaluation API")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Rubric scoring for MBA mock interview responses and essays",
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
        openapi_url="/api/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)

    # Add CORS middleware (outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api/v1")

    # Root health endpoint (for load balancer)
    @app.get("/health")
    async def root_health():
        """Simple health check for load balancer."""
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "prepwise.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
