"""
Workout Session Repository Interface (Port).

This module defines the abstract interface for workout session persistence:
the collaborator the active-workout tracker synchronizes with.

Methods are synchronous and return raw rows (dicts); conversion to domain
models happens in domain.converters.
"""
from typing import Protocol, Optional, List, Dict, Any


class WorkoutSessionRepository(Protocol):
    """
    Abstract interface for workout session persistence.

    Templates are read-only; sessions, their exercises and their sets are
    read-write. Reads return None (or an empty list) when nothing is found
    or the backend is unavailable; boolean writes return False on failure.
    """

    # -------------------------------------------------------------------------
    # Active session lifecycle
    # -------------------------------------------------------------------------

    def get_active_session(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the user's most recent IN_PROGRESS session.

        Args:
            user_id: Owner of the session

        Returns:
            Session row, or None if the user has no open session
        """
        ...

    def get_session_with_exercises(self, session_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a session with its exercises and their sets.

        Args:
            session_id: Session ID

        Returns:
            {"session": row, "exercises": [row + {"sets": [row, ...]}, ...]}
            ordered by sort_order / set_number, or None if not found
        """
        ...

    def start_session_from_template(self, user_id: str, template_id: str) -> Optional[str]:
        """
        Create a session (with exercises and sets) from a template.

        Args:
            user_id: Owner of the new session
            template_id: Template to instantiate

        Returns:
            New session ID, or None if nothing was created

        Raises:
            SessionPersistenceError: If the backend rejects the call
        """
        ...

    def start_manual_session(
        self,
        user_id: str,
        workout_name: str,
        workout_type: str,
        exercises: List[Dict[str, Any]],
    ) -> Optional[str]:
        """
        Create a session from a user-picked exercise list.

        Args:
            user_id: Owner of the new session
            workout_name: Display name
            workout_type: e.g. "manual" or "cardio"
            exercises: Items with id, name, target_sets, target_reps,
                rest_seconds, is_cardio

        Returns:
            New session ID, or None if nothing was created

        Raises:
            SessionPersistenceError: If the backend rejects the call
        """
        ...

    def update_set(self, set_id: str, updates: Dict[str, Any]) -> bool:
        """
        Update a single set's weight_kg / reps / is_completed.

        Args:
            set_id: Set ID
            updates: Columns to write

        Returns:
            True if updated, False on failure
        """
        ...

    def complete_session(
        self,
        session_id: str,
        duration_seconds: int,
        total_volume_kg: float,
    ) -> bool:
        """
        Mark a session COMPLETED and store its final duration and volume.

        Returns:
            True if updated, False on failure
        """
        ...

    def cancel_session(self, session_id: str) -> bool:
        """
        Mark a session CANCELLED.

        Returns:
            True if updated, False on failure
        """
        ...

    # -------------------------------------------------------------------------
    # Templates and history
    # -------------------------------------------------------------------------

    def get_templates(self, user_id: str) -> List[Dict[str, Any]]:
        """Get system templates plus the user's own, newest first."""
        ...

    def get_template_with_exercises(self, template_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a template and its exercises.

        Returns:
            {"template": row, "exercises": [row, ...]}, or None if not found
        """
        ...

    def get_workout_history(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """
        Get COMPLETED sessions, most recently completed first.

        Returns:
            Session rows, each carrying an `exercises` list shaped like the
            one returned by get_session_with_exercises
        """
        ...

    def delete_session(self, session_id: str) -> bool:
        """Delete a session; exercises and sets cascade."""
        ...
