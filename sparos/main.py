"""Main FastAPI application for the Sparos backend."""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from sparos.core import Settings, get_global_settings, setup_logging
from sparos.core.bungie_api import BungieAPIClient
from sparos.features.search import search_router
from sparos.features.search.dependencies import build_search_pipeline

logger = structlog.get_logger(__name__)


def _validate_api_key_configuration(settings: Settings) -> None:
    """Log whether a Bungie API key is configured."""
    if not settings.bungie_api_key:
        logger.warning(
            "BUNGIE_API_KEY not configured! Set it in the .env file.",
            hint="Create an application at https://www.bungie.net/en/Application",
        )
    else:
        logger.info("Bungie API key configured")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application.

    :param settings: Settings to use instead of the global ones
    :returns: Configured application
    """
    settings = settings or get_global_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info("Starting up Sparos backend")
        _validate_api_key_configuration(settings)

        bungie_client = BungieAPIClient(
            api_key=settings.bungie_api_key,
            base_url=settings.bungie_api_base_url,
            timeout=settings.bungie_request_timeout,
        )
        pipeline = build_search_pipeline(settings, bungie_client)
        app.state.bungie_client = bungie_client
        app.state.search_pipeline = pipeline

        if settings.restore_job_on_startup:
            pipeline.restore_job()

        yield

        logger.info("Shutting down Sparos backend")
        await pipeline.aclose()
        await bungie_client.close()

    app = FastAPI(
        title="Sparos - Bungie Player Search",
        description="Resolves Bungie names (Name#1234) into Destiny 2 accounts.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(search_router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint for monitoring tools and load balancers."""
        return {
            "status": "healthy",
            "message": "Application is running",
            "version": "0.1.0",
            "debug": settings.debug,
        }

    return app


_settings = get_global_settings()
setup_logging(_settings.log_level, json_logs=not _settings.debug)
app = create_app(_settings)
