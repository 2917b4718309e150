"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of repository interfaces
for fast, isolated testing. No database or external dependencies required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Failure injection and blocking hooks for the session repository
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeWorkoutSessionRepository, create_session_repo

    # Direct instantiation
    repo = FakeWorkoutSessionRepository()
    repo.seed_template("t1", "Push A", [{"exercise_id": "bench"}])

    # Factory function with a pre-populated template
    repo = create_session_repo()
"""
from typing import Any, Dict, List, Optional

from tests.fakes.workout_session_repository import (
    FakeWorkoutSessionRepository,
    days_ago,
)
from tests.fakes.user_progress_repository import FakeUserProgressRepository

PUSH_TEMPLATE_ID = "template-push-a"

PUSH_TEMPLATE_EXERCISES: List[Dict[str, Any]] = [
    {"exercise_id": "bench-press", "exercise_name": "Bench Press", "target_sets": 3, "target_reps": "8-12"},
    {"exercise_id": "overhead-press", "exercise_name": "Overhead Press", "target_sets": 3, "target_reps": "10"},
    {"exercise_id": "tricep-dips", "exercise_name": "Tricep Dips", "target_sets": 2, "target_reps": "12"},
]


# =============================================================================
# Factory Functions
# =============================================================================


def create_session_repo(
    *,
    template_id: str = PUSH_TEMPLATE_ID,
    exercises: Optional[List[Dict[str, Any]]] = None,
) -> FakeWorkoutSessionRepository:
    """
    Create a FakeWorkoutSessionRepository with one system template.

    Args:
        template_id: ID of the seeded template
        exercises: Template exercises (defaults to a push day)

    Returns:
        Pre-populated FakeWorkoutSessionRepository
    """
    repo = FakeWorkoutSessionRepository()
    repo.seed_template(
        template_id,
        "Push A",
        exercises if exercises is not None else PUSH_TEMPLATE_EXERCISES,
        template_type="push-a",
    )
    return repo


__all__ = [
    # Fake implementations
    "FakeWorkoutSessionRepository",
    "FakeUserProgressRepository",
    # Factory functions
    "create_session_repo",
    "days_ago",
    # Seed data
    "PUSH_TEMPLATE_ID",
    "PUSH_TEMPLATE_EXERCISES",
]
