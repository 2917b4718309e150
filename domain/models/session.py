"""
Workout session domain models.

A session is the read-write execution of a workout: it is started from a
template (or from a manual exercise list), its sets are logged one by one,
and it is closed exactly once by completing or cancelling it.

Templates are read-only definitions; sessions are instances.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class SessionStatus(str, Enum):
    """Lifecycle status of a workout session."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ExerciseStatus(str, Enum):
    """
    Progress of a single exercise within a session.

    Derived from its sets: COMPLETED iff every set is completed.
    """

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


# =============================================================================
# Templates (read-only definitions)
# =============================================================================


class TemplateExercise(BaseModel):
    """An exercise slot within a workout template."""

    id: str
    template_id: str
    exercise_id: str
    sort_order: int = 0
    target_sets: int = Field(default=3, ge=0)
    target_reps: Optional[str] = Field(
        default=None,
        description="Rep target, e.g. '10', '8-12'",
    )
    rest_seconds: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class WorkoutTemplate(BaseModel):
    """A workout definition; user_id is None for system templates."""

    id: str
    user_id: Optional[str] = None
    name: str
    category: Optional[str] = Field(
        default=None,
        description="Category such as 'push', 'pull', 'legs', 'cardio', 'custom'",
    )
    type: Optional[str] = Field(default=None, description="Template type, e.g. 'push-a'")
    estimated_duration: Optional[int] = Field(
        default=None, ge=0, description="Estimated duration in minutes"
    )
    exercises: List[TemplateExercise] = Field(default_factory=list)

    @property
    def is_system(self) -> bool:
        """System templates are shared by every user."""
        return self.user_id is None


# =============================================================================
# Sessions (read-write execution)
# =============================================================================


class SessionSet(BaseModel):
    """One set of one exercise. Never reordered after creation."""

    id: str
    session_exercise_id: str
    set_number: int = Field(..., ge=1)
    weight_kg: float = Field(default=0.0, ge=0)
    reps: int = Field(default=0, ge=0)
    is_completed: bool = False

    @property
    def volume(self) -> float:
        """Weight x reps, counted only once the set is completed."""
        if not self.is_completed:
            return 0.0
        return self.weight_kg * self.reps


class SessionExercise(BaseModel):
    """
    One exercise instance within a session, owning its sets.

    `exercise_id` references the exercise catalog; `id` is the row id of
    this instance within the session.
    """

    id: str
    session_id: str
    exercise_id: str
    exercise_name: str = ""
    sort_order: int = 0
    status: ExerciseStatus = ExerciseStatus.NOT_STARTED
    target_sets: Optional[int] = None
    target_reps: Optional[str] = None
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None
    sets: List[SessionSet] = Field(default_factory=list)

    @property
    def completed_set_count(self) -> int:
        return sum(1 for s in self.sets if s.is_completed)

    @property
    def all_sets_completed(self) -> bool:
        """True when the exercise has sets and every one is completed."""
        return bool(self.sets) and all(s.is_completed for s in self.sets)

    def find_set(self, set_id: str) -> Optional[SessionSet]:
        for s in self.sets:
            if s.id == set_id:
                return s
        return None


class WorkoutSession(BaseModel):
    """
    A workout session row.

    Only one session per user may be IN_PROGRESS at a time.
    """

    id: str
    user_id: str
    template_id: Optional[str] = None
    workout_name: str = ""
    workout_type: Optional[str] = None
    status: SessionStatus = SessionStatus.IN_PROGRESS
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    total_volume_kg: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.IN_PROGRESS

    @property
    def is_closed(self) -> bool:
        return self.status in (SessionStatus.COMPLETED, SessionStatus.CANCELLED)


class SessionGraph(BaseModel):
    """A session together with its ordered exercises and their sets."""

    session: WorkoutSession
    exercises: List[SessionExercise] = Field(default_factory=list)


# =============================================================================
# Manual sessions
# =============================================================================


class ManualExercise(BaseModel):
    """An exercise picked by the user for a manual session."""

    id: str = Field(..., min_length=1, description="Exercise catalog id")
    name: str = Field(..., min_length=1)
    target_sets: int = Field(default=3, ge=1, le=20)
    target_reps: str = "10"
    rest_seconds: int = Field(default=60, ge=0)
    is_cardio: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("exercise name cannot be blank")
        return v


# =============================================================================
# Display
# =============================================================================


class ExerciseVolumeBreakdown(BaseModel):
    """Per-exercise totals for a workout summary."""

    exercise_id: str
    name: str
    sets: int = 0
    completed_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0.0


class WorkoutSummary(BaseModel):
    """Summary of a finished session for history listings."""

    session_id: str
    workout_name: str
    date: Optional[datetime] = None
    duration_seconds: int = 0
    total_volume_kg: float = 0.0
    exercise_count: int = 0
    completed_exercise_count: int = 0
    exercises: List[ExerciseVolumeBreakdown] = Field(default_factory=list)
