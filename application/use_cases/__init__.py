"""
Application Use Cases for the workout session service.

Read-side use cases that orchestrate domain logic over repository ports.
Dependencies are injected via constructors for testability; results are
plain dataclasses holding domain models, not API responses.

Usage:
    from application.use_cases import (
        GetWorkoutHistoryUseCase,
        GetCompletionCalendarUseCase,
        GetWorkoutTemplatesUseCase,
    )

    history = GetWorkoutHistoryUseCase(session_repo=session_repo)
    result = history.execute(user_id="user-123", limit=20)

    calendar = GetCompletionCalendarUseCase(
        session_repo=session_repo,
        progress_repo=progress_repo,
    )
    result = calendar.execute(user_id="user-123")
"""

from application.use_cases.get_completion_calendar import (
    CompletionCalendarResult,
    GetCompletionCalendarUseCase,
)
from application.use_cases.get_workout_history import (
    GetWorkoutHistoryUseCase,
    WorkoutHistoryResult,
)
from application.use_cases.get_workout_templates import (
    GetWorkoutTemplatesUseCase,
    WorkoutTemplatesResult,
)

__all__ = [
    # History
    "GetWorkoutHistoryUseCase",
    "WorkoutHistoryResult",
    # Templates
    "GetWorkoutTemplatesUseCase",
    "WorkoutTemplatesResult",
    # Calendar
    "GetCompletionCalendarUseCase",
    "CompletionCalendarResult",
]
