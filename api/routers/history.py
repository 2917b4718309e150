"""
Workout history router.

- /workouts/history - Completed sessions with summaries
- /workouts/calendar - Completion days and streak stats
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import (
    get_completion_calendar_use_case,
    get_current_user,
    get_workout_history_use_case,
)
from api.schemas.active_workout import CompletionCalendarResponse, WorkoutHistoryResponse
from application.use_cases import GetCompletionCalendarUseCase, GetWorkoutHistoryUseCase

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/workouts",
    tags=["History"],
)


@router.get("/history", response_model=WorkoutHistoryResponse)
def get_workout_history(
    limit: int = Query(default=20, ge=1, le=100),
    user_id: str = Depends(get_current_user),
    use_case: GetWorkoutHistoryUseCase = Depends(get_workout_history_use_case),
):
    """List completed workouts, most recent first."""
    result = use_case.execute(user_id, limit=limit)
    return WorkoutHistoryResponse(
        workouts=result.workouts,
        count=result.count,
        total_volume_kg=result.total_volume_kg,
        total_duration_seconds=result.total_duration_seconds,
    )


@router.get("/calendar", response_model=CompletionCalendarResponse)
def get_completion_calendar(
    today: Optional[date] = Query(default=None, description="Reference day, defaults to today (UTC)"),
    user_id: str = Depends(get_current_user),
    use_case: GetCompletionCalendarUseCase = Depends(get_completion_calendar_use_case),
):
    """
    Trained days and headline stats.

    Merges completed sessions with the legacy progress blob.
    """
    result = use_case.execute(user_id, today=today)
    return CompletionCalendarResponse(
        days=result.days,
        this_month_count=result.stats.this_month_count,
        current_streak=result.stats.current_streak,
        weekly_average=result.stats.weekly_average,
    )
