"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository interfaces
defined in application.ports. These implementations can be injected into services
and routers for clean separation of concerns and testability.

Usage:
    from supabase import create_client
    from infrastructure.db import (
        SupabaseWorkoutSessionRepository,
        SupabaseUserProgressRepository,
    )

    # Create Supabase client
    client = create_client(SUPABASE_URL, SUPABASE_KEY)

    # Instantiate repositories with injected client
    session_repo = SupabaseWorkoutSessionRepository(client)
    progress_repo = SupabaseUserProgressRepository(client)
"""

from infrastructure.db.workout_session_repository import SupabaseWorkoutSessionRepository
from infrastructure.db.user_progress_repository import SupabaseUserProgressRepository

__all__ = [
    # Session persistence
    "SupabaseWorkoutSessionRepository",

    # Legacy progress
    "SupabaseUserProgressRepository",
]
