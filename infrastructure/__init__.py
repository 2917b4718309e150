"""
Infrastructure Layer for the workout session service.

This package contains concrete implementations of repository interfaces:
- db/: Supabase database implementations
"""

# Re-export database repositories for convenient access
from infrastructure.db import (
    SupabaseWorkoutSessionRepository,
    SupabaseUserProgressRepository,
)

__all__ = [
    "SupabaseWorkoutSessionRepository",
    "SupabaseUserProgressRepository",
]
