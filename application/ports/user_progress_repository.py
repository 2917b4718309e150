"""
User Progress Repository Interface (Port).

Read access to the legacy per-user progress row, whose
`completed_workouts` column holds the old completion blob.
"""
from typing import Protocol, Optional, Dict, Any


class UserProgressRepository(Protocol):
    """Abstract interface for reading legacy user progress."""

    def get_by_user_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the progress row for a user.

        Args:
            user_id: User ID

        Returns:
            Row with at least `completed_workouts` (JSON text, list or None)
            and `start_date`, or None if the user has no progress row
        """
        ...
