"""
API package for the workout session service.

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
- schemas/: Request and response models
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_session_repo,
    get_progress_repo,
    get_current_user,
    get_tracker_registry,
    get_active_workout_tracker,
)

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_session_repo",
    "get_progress_repo",
    # Authentication
    "get_current_user",
    # Trackers
    "get_tracker_registry",
    "get_active_workout_tracker",
]
