"""
Supabase implementation of UserProgressRepository.

Reads the legacy user_progress row. The row is never written here; new
completions are recorded as COMPLETED workout sessions.
"""
import logging
from typing import Any, Dict, Optional

from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseUserProgressRepository:
    """Supabase implementation of UserProgressRepository protocol."""

    def __init__(self, client: Client):
        self._client = client

    def get_by_user_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Get the progress row for a user."""
        try:
            result = (
                self._client.table("user_progress")
                .select("user_id, start_date, completed_workouts")
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Failed to get progress for user {user_id}: {e}")
            return None
