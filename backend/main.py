"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    # Initialize Sentry for error tracking
    _init_sentry(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.tracker_registry.aclose()

    # Create FastAPI app
    app = FastAPI(
        title="LTwins Workout Session API",
        description="Active workout tracking, history and completion calendar",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tracker_registry = _create_tracker_registry(settings)

    # Configure CORS middleware
    _configure_cors(app, settings)

    # Include API routers
    _include_routers(app)

    logger.info(
        f"Workout session API created (environment={settings.environment}, "
        f"stale_session_hours={settings.stale_session_hours}, "
        f"set_sync_max_attempts={settings.set_sync_max_attempts})"
    )
    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
        )
        logger.info("Sentry initialized for workout-session-api")


def _create_tracker_registry(settings: Settings):
    """One tracker registry per app; trackers live until shutdown."""
    from api.deps import build_session_repo
    from application.services import ActiveWorkoutRegistry

    return ActiveWorkoutRegistry.from_settings(settings, build_session_repo)


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    trusted_origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=trusted_origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in trusted_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import (
        health_router,
        active_workout_router,
        history_router,
        templates_router,
    )

    # Health router (no prefix - /health at root)
    app.include_router(health_router)

    # Domain routers (with prefixes defined in each router)
    app.include_router(active_workout_router)
    app.include_router(history_router)
    app.include_router(templates_router)


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
