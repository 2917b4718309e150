"""
Get Workout History Use Case.

Lists a user's completed sessions as display summaries.
"""
import logging
from dataclasses import dataclass, field
from typing import List

from application.ports import WorkoutSessionRepository
from domain.converters import db_payload_to_graph, graph_to_summary
from domain.models import WorkoutSummary

logger = logging.getLogger(__name__)


@dataclass
class WorkoutHistoryResult:
    """Result of listing workout history."""
    workouts: List[WorkoutSummary] = field(default_factory=list)
    count: int = 0
    total_volume_kg: float = 0.0
    total_duration_seconds: int = 0


class GetWorkoutHistoryUseCase:
    """Use case for the completed-workouts list."""

    def __init__(self, session_repo: WorkoutSessionRepository):
        """
        Initialize with required dependencies.

        Args:
            session_repo: Repository for session persistence
        """
        self._session_repo = session_repo

    def execute(self, user_id: str, limit: int = 20) -> WorkoutHistoryResult:
        """
        Get the most recent completed sessions.

        Rows that cannot be converted are skipped and logged.

        Args:
            user_id: Current user ID
            limit: Maximum number of sessions to return

        Returns:
            WorkoutHistoryResult with summaries, newest first
        """
        rows = self._session_repo.get_workout_history(user_id, limit=limit)

        summaries: List[WorkoutSummary] = []
        for row in rows:
            try:
                graph = db_payload_to_graph(
                    {"session": row, "exercises": row.get("exercises") or []}
                )
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping unreadable history row {row.get('id')}: {e}")
                continue
            summaries.append(graph_to_summary(graph))

        return WorkoutHistoryResult(
            workouts=summaries,
            count=len(summaries),
            total_volume_kg=round(sum(s.total_volume_kg for s in summaries), 2),
            total_duration_seconds=sum(s.duration_seconds for s in summaries),
        )
