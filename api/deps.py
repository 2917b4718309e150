"""
FastAPI Dependency Providers for the workout session API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations. This
enables clean separation of concerns and easy testing with fakes.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository providers create new instances per-request
- Trackers are long-lived, one per user, held by the registry on app.state
- Auth providers wrap backend.auth

Usage in routers:
    from api.deps import get_active_workout_tracker
    from application.services import ActiveWorkoutTracker

    @router.get("/active-workout")
    def read_state(
        tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_tracker_registry] = lambda: registry
    app.dependency_overrides[get_current_user] = lambda: "user-123"
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from supabase import Client, create_client

# Protocol types (interfaces)
from application.ports import (
    UserProgressRepository,
    WorkoutSessionRepository,
)
from application.services import ActiveWorkoutRegistry, ActiveWorkoutTracker
from application.use_cases import (
    GetCompletionCalendarUseCase,
    GetWorkoutHistoryUseCase,
    GetWorkoutTemplatesUseCase,
)

# Concrete implementations
from infrastructure import (
    SupabaseUserProgressRepository,
    SupabaseWorkoutSessionRepository,
)

from backend.settings import Settings, get_settings as _get_settings

# Auth (wrapped to maintain single source of truth)
from backend.auth import (
    get_current_user as _get_current_user,
)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_session_repo(
    client: Client = Depends(get_supabase_client_required),
) -> WorkoutSessionRepository:
    """
    Get WorkoutSessionRepository implementation.

    The return type is the Protocol to enable easy faking.
    """
    return SupabaseWorkoutSessionRepository(client)


def get_progress_repo(
    client: Client = Depends(get_supabase_client_required),
) -> UserProgressRepository:
    """Get UserProgressRepository implementation."""
    return SupabaseUserProgressRepository(client)


def build_session_repo() -> WorkoutSessionRepository:
    """Repository factory used by the tracker registry."""
    return SupabaseWorkoutSessionRepository(get_supabase_client_required())


# =============================================================================
# Authentication Providers
# =============================================================================


async def get_current_user(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Get the current authenticated user ID.

    Wraps backend.auth.get_current_user for dependency injection.

    Raises:
        HTTPException: 401 if authentication fails
    """
    return await _get_current_user(
        authorization=authorization,
        x_api_key=x_api_key,
        settings=settings,
    )


# =============================================================================
# Tracker Providers
# =============================================================================


def get_tracker_registry(request: Request) -> ActiveWorkoutRegistry:
    """Get the process-wide tracker registry created by create_app()."""
    return request.app.state.tracker_registry


async def get_active_workout_tracker(
    user_id: str = Depends(get_current_user),
    registry: ActiveWorkoutRegistry = Depends(get_tracker_registry),
) -> ActiveWorkoutTracker:
    """
    Get the current user's tracker.

    The first request for a user loads their active session.
    """
    tracker = registry.get(user_id)
    if not tracker.is_initialized and not tracker.is_loading:
        await tracker.load_active_session()
    return tracker


# =============================================================================
# Use Case Providers
# =============================================================================


def get_workout_history_use_case(
    session_repo: WorkoutSessionRepository = Depends(get_session_repo),
) -> GetWorkoutHistoryUseCase:
    return GetWorkoutHistoryUseCase(session_repo=session_repo)


def get_workout_templates_use_case(
    session_repo: WorkoutSessionRepository = Depends(get_session_repo),
) -> GetWorkoutTemplatesUseCase:
    return GetWorkoutTemplatesUseCase(session_repo=session_repo)


def get_completion_calendar_use_case(
    session_repo: WorkoutSessionRepository = Depends(get_session_repo),
    progress_repo: UserProgressRepository = Depends(get_progress_repo),
) -> GetCompletionCalendarUseCase:
    return GetCompletionCalendarUseCase(
        session_repo=session_repo,
        progress_repo=progress_repo,
    )


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_session_repo",
    "get_progress_repo",
    "build_session_repo",
    # Authentication
    "get_current_user",
    # Trackers
    "get_tracker_registry",
    "get_active_workout_tracker",
    # Use cases
    "get_workout_history_use_case",
    "get_completion_calendar_use_case",
    "get_workout_templates_use_case",
]
