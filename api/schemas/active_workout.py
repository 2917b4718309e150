"""
Active Workout Schemas.

Request bodies for the /active-workout endpoints and the response shapes
for tracker state, completion, history and the completion calendar.
"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.models import (
    ExerciseStatus,
    ManualExercise,
    SessionExercise,
    WorkoutSession,
    WorkoutSummary,
)


# =============================================================================
# Requests
# =============================================================================


class StartWorkoutRequest(BaseModel):
    """Request body for POST /active-workout/start."""
    template_id: str = Field(..., min_length=1, description="Template to start from")


class StartManualWorkoutRequest(BaseModel):
    """Request body for POST /active-workout/manual."""
    name: str = Field(..., max_length=200, description="Workout display name")
    exercises: List[ManualExercise] = Field(default_factory=list)
    workout_type: str = Field(default="manual", max_length=50)


class ExerciseStatusUpdate(BaseModel):
    """Request body for PATCH /active-workout/exercises/{exercise_id}."""
    status: ExerciseStatus


class SetCompletionUpdate(BaseModel):
    """Request body for PATCH /active-workout/sets/{set_id}."""
    is_completed: bool
    weight: Optional[float] = Field(default=None, ge=0, description="Weight in kg")
    reps: Optional[int] = Field(default=None, ge=0)


# =============================================================================
# Responses
# =============================================================================


class ActiveWorkoutResponse(BaseModel):
    """Current tracker state."""
    phase: str
    session_id: Optional[str] = None
    session: Optional[WorkoutSession] = None
    exercises: List[SessionExercise] = Field(default_factory=list)
    elapsed_seconds: int = 0
    elapsed_display: str = ""
    total_volume_kg: float = 0.0
    pending_set_updates: int = 0


class StartWorkoutResponse(BaseModel):
    session_id: str
    state: ActiveWorkoutResponse


class SetCompletionResponse(BaseModel):
    set_id: str
    found: bool
    state: ActiveWorkoutResponse


class CancelWorkoutResponse(BaseModel):
    cancelled: bool
    state: ActiveWorkoutResponse


class CompleteWorkoutResponse(BaseModel):
    session_id: str
    duration_seconds: int
    duration_display: str
    total_volume_kg: float
    volume_display: str
    persisted: bool


class WorkoutHistoryResponse(BaseModel):
    workouts: List[WorkoutSummary] = Field(default_factory=list)
    count: int = 0
    total_volume_kg: float = 0.0
    total_duration_seconds: int = 0


class CompletionCalendarResponse(BaseModel):
    days: List[date] = Field(default_factory=list)
    this_month_count: int = 0
    current_streak: int = 0
    weekly_average: float = 0.0
