"""
Get Workout Templates Use Case.

Lists the templates a user can start a session from, and loads one
template with its exercises.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from application.ports import WorkoutSessionRepository
from domain.converters import db_row_to_template
from domain.models import WorkoutTemplate

logger = logging.getLogger(__name__)


@dataclass
class WorkoutTemplatesResult:
    """Result of listing templates."""
    templates: List[WorkoutTemplate] = field(default_factory=list)
    count: int = 0


class GetWorkoutTemplatesUseCase:
    """Use case for template selection before starting a workout."""

    def __init__(self, session_repo: WorkoutSessionRepository):
        """
        Initialize with required dependencies.

        Args:
            session_repo: Repository holding the template tables
        """
        self._session_repo = session_repo

    def list(self, user_id: str) -> WorkoutTemplatesResult:
        """
        System templates plus the user's own, newest first.

        Exercises are not loaded here; rows that cannot be converted are
        skipped and logged.
        """
        templates: List[WorkoutTemplate] = []
        for row in self._session_repo.get_templates(user_id):
            try:
                templates.append(db_row_to_template(row))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping unreadable template row {row.get('id')}: {e}")
        return WorkoutTemplatesResult(templates=templates, count=len(templates))

    def get(self, user_id: str, template_id: str) -> Optional[WorkoutTemplate]:
        """
        One template with its exercises in order.

        Returns:
            The template, or None if it does not exist or belongs to
            another user
        """
        payload = self._session_repo.get_template_with_exercises(template_id)
        if not payload:
            return None

        template = db_row_to_template(payload["template"], payload.get("exercises"))
        if not template.is_system and template.user_id != user_id:
            logger.warning(f"User {user_id} requested template {template_id} owned by another user")
            return None
        return template
