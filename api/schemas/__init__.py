"""
Pydantic schemas for API requests and responses.

Organized by feature/domain:
- active_workout: Active workout tracker, history and calendar models
- templates: Workout templates a session can be started from
"""

from api.schemas.active_workout import (
    ActiveWorkoutResponse,
    CancelWorkoutResponse,
    CompleteWorkoutResponse,
    CompletionCalendarResponse,
    ExerciseStatusUpdate,
    SetCompletionResponse,
    SetCompletionUpdate,
    StartManualWorkoutRequest,
    StartWorkoutRequest,
    StartWorkoutResponse,
    WorkoutHistoryResponse,
)
from api.schemas.templates import WorkoutTemplateListResponse

__all__ = [
    "ActiveWorkoutResponse",
    "CancelWorkoutResponse",
    "CompleteWorkoutResponse",
    "CompletionCalendarResponse",
    "ExerciseStatusUpdate",
    "SetCompletionResponse",
    "SetCompletionUpdate",
    "StartManualWorkoutRequest",
    "StartWorkoutRequest",
    "StartWorkoutResponse",
    "WorkoutHistoryResponse",
    "WorkoutTemplateListResponse",
]
