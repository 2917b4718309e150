"""
Derived workout values: volume, duration and exercise status.

Nothing here is stored; every value is recomputed from the sets and
timestamps it is given.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from domain.models import (
    ExerciseStatus,
    ExerciseVolumeBreakdown,
    SessionExercise,
    SessionSet,
)


def calculate_set_volume(reps: int, weight_kg: float) -> float:
    """Volume of a single set (reps x weight)."""
    return reps * weight_kg


def calculate_exercise_volume(sets: Iterable[SessionSet]) -> float:
    """Sum of volume over the completed sets of one exercise."""
    return sum(
        calculate_set_volume(s.reps, s.weight_kg) for s in sets if s.is_completed
    )


def calculate_session_volume(exercises: Iterable[SessionExercise]) -> float:
    """
    Total volume of a session: sum over completed sets of weight x reps.

    Returns 0 when no set is completed.
    """
    return sum(calculate_exercise_volume(ex.sets) for ex in exercises)


def calculate_workout_breakdown(
    exercises: Iterable[SessionExercise],
) -> List[ExerciseVolumeBreakdown]:
    """Volume and rep totals for each exercise, in session order."""
    breakdown = []
    for ex in exercises:
        completed = [s for s in ex.sets if s.is_completed]
        breakdown.append(
            ExerciseVolumeBreakdown(
                exercise_id=ex.exercise_id,
                name=ex.exercise_name,
                sets=len(ex.sets),
                completed_sets=len(completed),
                total_reps=sum(s.reps for s in completed),
                total_volume=calculate_exercise_volume(ex.sets),
            )
        )
    return breakdown


def session_duration_seconds(
    started_at: Optional[datetime],
    completed_at: Optional[datetime] = None,
    *,
    now: Optional[datetime] = None,
) -> int:
    """
    Whole seconds between start and completion, or start and now while active.

    Naive datetimes are treated as UTC. Never negative; 0 without a start.
    """
    if started_at is None:
        return 0
    end = completed_at or now or datetime.now(timezone.utc)
    delta = _as_utc(end) - _as_utc(started_at)
    return max(0, int(delta.total_seconds()))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def derive_exercise_status(
    sets: List[SessionSet],
    current: ExerciseStatus = ExerciseStatus.NOT_STARTED,
) -> ExerciseStatus:
    """
    Status implied by an exercise's sets.

    COMPLETED iff every set is completed; IN_PROGRESS once any set is
    completed. With no completed set, an exercise the user explicitly
    started stays IN_PROGRESS. An exercise without sets keeps its status.
    """
    if not sets:
        return current
    completed = sum(1 for s in sets if s.is_completed)
    if completed == len(sets):
        return ExerciseStatus.COMPLETED
    if completed > 0:
        return ExerciseStatus.IN_PROGRESS
    if current == ExerciseStatus.IN_PROGRESS:
        return current
    return ExerciseStatus.NOT_STARTED


def format_duration(seconds: Optional[int]) -> str:
    """Format seconds as MM:SS, or HH:MM:SS from one hour up. Empty for 0."""
    if not seconds:
        return ""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_volume(kg: float) -> str:
    """Format a volume for display: tonnes from 1000 kg up."""
    if kg >= 1000:
        return f"{kg / 1000:.1f}t"
    return f"{round(kg)}kg"
