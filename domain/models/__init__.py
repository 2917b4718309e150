"""
Domain models for the workout session service.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).

These models represent the core business concepts:
- WorkoutSession: one in-progress or finished workout
- SessionExercise: an exercise instance owned by a session
- SessionSet: one logged set of an exercise
- WorkoutTemplate / TemplateExercise: read-only workout definitions
- CompletedWorkoutEntry: normalized legacy progress entries

Usage:
    >>> from domain.models import SessionSet

    >>> s = SessionSet(id="s1", session_exercise_id="e1", set_number=1,
    ...                weight_kg=100, reps=5, is_completed=True)
    >>> s.volume
    500.0
"""

from domain.models.progress import (
    CalendarMarker,
    CompletedWorkoutEntry,
    DetailedCompletion,
    WorkoutReference,
    calendar_marker_key,
    entry_day,
    normalize_completed_workouts,
)
from domain.models.session import (
    ExerciseVolumeBreakdown,
    ExerciseStatus,
    ManualExercise,
    SessionExercise,
    SessionGraph,
    SessionSet,
    SessionStatus,
    TemplateExercise,
    WorkoutSession,
    WorkoutSummary,
    WorkoutTemplate,
)

__all__ = [
    # Sessions
    "WorkoutSession",
    "SessionExercise",
    "SessionSet",
    "SessionGraph",
    "ManualExercise",
    "WorkoutSummary",
    "ExerciseVolumeBreakdown",
    # Templates
    "WorkoutTemplate",
    "TemplateExercise",
    # Enums
    "SessionStatus",
    "ExerciseStatus",
    # Legacy progress
    "CompletedWorkoutEntry",
    "CalendarMarker",
    "WorkoutReference",
    "DetailedCompletion",
    "calendar_marker_key",
    "entry_day",
    "normalize_completed_workouts",
]
