"""
Get Completion Calendar Use Case.

Builds the list of trained days and its headline stats from two sources:
completed sessions and the legacy per-user progress blob.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional

from application.ports import UserProgressRepository, WorkoutSessionRepository
from domain.converters import db_row_to_session
from domain.models import CompletedWorkoutEntry, entry_day, normalize_completed_workouts
from domain.services.completion_stats import (
    CompletionStats,
    calculate_completion_stats,
    unique_sorted_days,
)

logger = logging.getLogger(__name__)

# Enough sessions to cover any realistic calendar view
CALENDAR_SESSION_LIMIT = 500


@dataclass
class CompletionCalendarResult:
    """Result of building the completion calendar."""
    days: List[date] = field(default_factory=list)
    stats: CompletionStats = field(
        default_factory=lambda: CompletionStats(0, 0, 0.0)
    )
    legacy_entries: List[CompletedWorkoutEntry] = field(default_factory=list)


class GetCompletionCalendarUseCase:
    """
    Use case for the completion calendar.

    Usage:
        use_case = GetCompletionCalendarUseCase(session_repo, progress_repo)
        result = use_case.execute("user-123")
        result.stats.current_streak
    """

    def __init__(
        self,
        session_repo: WorkoutSessionRepository,
        progress_repo: UserProgressRepository,
    ):
        self._session_repo = session_repo
        self._progress_repo = progress_repo

    def execute(self, user_id: str, today: Optional[date] = None) -> CompletionCalendarResult:
        """
        Merge session and legacy completion days and compute stats.

        Args:
            user_id: Current user ID
            today: Reference day for month, streak and weekly average
                (defaults to the current UTC date)
        """
        today = today or datetime.now(timezone.utc).date()

        days: List[date] = []
        for row in self._session_repo.get_workout_history(
            user_id, limit=CALENDAR_SESSION_LIMIT
        ):
            try:
                session = db_row_to_session(row)
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping unreadable session row {row.get('id')}: {e}")
                continue
            finished = session.completed_at or session.started_at
            days.append(finished.date())

        legacy: List[CompletedWorkoutEntry] = []
        progress = self._progress_repo.get_by_user_id(user_id)
        if progress:
            legacy = normalize_completed_workouts(progress.get("completed_workouts"))
            for entry in legacy:
                day = entry_day(entry)
                if day is not None:
                    days.append(day)

        unique_days = unique_sorted_days(days)
        return CompletionCalendarResult(
            days=unique_days,
            stats=calculate_completion_stats(unique_days, today),
            legacy_entries=legacy,
        )
