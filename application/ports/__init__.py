"""
Repository Interfaces (Ports) for the workout session service.

This package defines abstract interfaces that decouple application logic from
infrastructure (database, external services). Implementations are provided
in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the application needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import WorkoutSessionRepository

    class ActiveWorkoutTracker:
        def __init__(self, repo: WorkoutSessionRepository, ...):
            self._repo = repo
"""

# Session persistence
from application.ports.workout_session_repository import WorkoutSessionRepository

# Legacy progress
from application.ports.user_progress_repository import UserProgressRepository

__all__ = [
    "WorkoutSessionRepository",
    "UserProgressRepository",
]
