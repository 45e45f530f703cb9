"""peer360 FastAPI application."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from peer360.api.errors import register_error_handlers
from peer360.api.evaluations import router as evaluations_router
from peer360.api.health import router as health_router
from peer360.api.members import router as members_router
from peer360.api.responses import router as responses_router
from peer360.config import Settings, settings
from peer360.security.rate_limit import AccessCodeRateLimiter

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config: Settings = settings) -> FastAPI:
    """Build the application with its own rate-limit state."""
    app = FastAPI(
        title="peer360 - 360° peer evaluations",
        description="Anonymous peer ratings with encrypted member data",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.rate_limiter = AccessCodeRateLimiter(
        max_attempts=config.access_code_max_attempts,
        window_seconds=config.access_code_window_seconds,
        lockout_seconds=config.access_code_lockout_seconds,
    )

    register_error_handlers(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(evaluations_router, prefix="/v1", tags=["Evaluations"])
    app.include_router(members_router, prefix="/v1", tags=["Members"])
    app.include_router(responses_router, prefix="/v1", tags=["Responses"])

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"service": "peer360", "version": "0.1.0", "docs": "/docs"}

    return app


app = create_app()
