"""
Main FastAPI application entry point.

Builds the FastAPI application, wires admission control in front of every
route and runs the limiter registry sweeper for the lifetime of the process.

Feature routers (auth, posts, uploads, try-on) are mounted by the services
that own them; this module only provides the gate they sit behind.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from trends_api.core.config import get_settings
from trends_api.presentation.middleware import AdmissionMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: Start the rate limit registry sweeper
    - Shutdown: Stop the sweeper

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    from trends_api.core.container import get_admission_controller, get_logger
    from trends_api.infrastructure.rate_limit import RegistrySweeper

    settings = get_settings()
    sweeper: RegistrySweeper | None = None
    if settings.rate_limit_enabled:
        sweeper = RegistrySweeper(
            admission=get_admission_controller(),
            interval_seconds=settings.rate_limit_sweep_interval_seconds,
            logger=get_logger(),
        )
        sweeper.start()

    yield

    if sweeper is not None:
        await sweeper.stop()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Application with admission middleware and health endpoints.
    """
    settings = get_settings()
    application = FastAPI(
        title=settings.app_name,
        description="Fashion community and AI try-on platform",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Admission control (IP blacklist/whitelist, token bucket rate limiting)
    application.add_middleware(
        AdmissionMiddleware,
        enabled=settings.rate_limit_enabled,
    )

    @application.get("/")
    async def root() -> dict[str, str]:
        """
        Root endpoint - basic health check.

        Returns:
            dict: Welcome message with API status.
        """
        return {
            "message": settings.app_name,
            "status": "operational",
            "version": settings.app_version,
        }

    @application.get("/health")
    async def health() -> dict[str, str]:
        """
        Health check endpoint for monitoring and load balancers.

        Returns:
            dict: Health status indicator.
        """
        return {"status": "healthy"}

    return application


app = create_app()
