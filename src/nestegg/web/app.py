"""FastAPI application factory for the nestegg API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nestegg import __version__
from nestegg.config import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: log startup and shutdown."""
    settings = app.state.settings
    logger.info(
        "Starting nestegg API (max %d simulations, %d years)",
        settings.max_simulations,
        settings.max_years,
    )
    yield
    logger.info("nestegg API shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="nestegg API",
        description="Monte Carlo projection of a monthly-funded investment portfolio",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Accept"],
        expose_headers=["Content-Disposition"],
    )

    _register_routers(app)

    return app


def _register_routers(app: FastAPI):
    """Register all API routers."""
    from nestegg.web.routers.simulation import router as simulation_router
    from nestegg.web.routers.system import router as system_router

    app.include_router(simulation_router, prefix="/api/v1")
    app.include_router(system_router, prefix="/api/v1")
