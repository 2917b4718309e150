"""
Domain layer for the workout session service.

This package contains pure domain models, converters and computations that
are independent of infrastructure concerns (database, API, external services).
"""

from domain.models import (
    ExerciseStatus,
    SessionExercise,
    SessionGraph,
    SessionSet,
    SessionStatus,
    WorkoutSession,
)

__all__ = [
    "WorkoutSession",
    "SessionExercise",
    "SessionSet",
    "SessionGraph",
    "SessionStatus",
    "ExerciseStatus",
]
