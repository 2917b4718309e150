"""
Supabase implementation of WorkoutSessionRepository.

Sessions live in three tables (workout_sessions -> session_exercises ->
session_sets). Template sessions are created server-side by the
start_workout_session RPC; manual sessions are inserted table by table.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import Client

from application.exceptions import SessionPersistenceError

logger = logging.getLogger(__name__)

SESSIONS_TABLE = "workout_sessions"
EXERCISES_TABLE = "session_exercises"
SETS_TABLE = "session_sets"
TEMPLATES_TABLE = "workout_templates"
TEMPLATE_EXERCISES_TABLE = "template_exercises"

START_SESSION_RPC = "start_workout_session"

_LEADING_INT_RE = re.compile(r"\d+")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_target_reps(target_reps: Any) -> int:
    """Initial reps for a set from a target like "10" or "8-12" (lower bound)."""
    if isinstance(target_reps, int):
        return max(target_reps, 0)
    match = _LEADING_INT_RE.search(str(target_reps or ""))
    return int(match.group()) if match else 0


def _with_sets(exercise_row: Dict[str, Any]) -> Dict[str, Any]:
    """Rename the embedded session_sets relation to `sets`, ordered by set_number."""
    row = dict(exercise_row)
    sets = row.pop(SETS_TABLE, None) or row.get("sets") or []
    row["sets"] = sorted(sets, key=lambda s: s.get("set_number") or 0)
    return row


class SupabaseWorkoutSessionRepository:
    """
    Supabase implementation of WorkoutSessionRepository protocol.

    The client is injected via constructor for testability.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    # =========================================================================
    # Session reads
    # =========================================================================

    def get_active_session(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = (
                self._client.table(SESSIONS_TABLE)
                .select("*")
                .eq("user_id", user_id)
                .eq("status", "IN_PROGRESS")
                .order("started_at", desc=True)
                .limit(1)
                .execute()
            )
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Failed to get active session for user {user_id}: {e}")
            return None

    def get_session_with_exercises(self, session_id: str) -> Optional[Dict[str, Any]]:
        try:
            session_result = (
                self._client.table(SESSIONS_TABLE)
                .select("*")
                .eq("id", session_id)
                .limit(1)
                .execute()
            )
            if not session_result.data:
                logger.warning(f"Session {session_id} not found")
                return None

            exercises_result = (
                self._client.table(EXERCISES_TABLE)
                .select(f"*, {SETS_TABLE}(*)")
                .eq("session_id", session_id)
                .order("sort_order")
                .execute()
            )
            return {
                "session": session_result.data[0],
                "exercises": [_with_sets(e) for e in exercises_result.data or []],
            }
        except Exception as e:
            logger.error(f"Failed to get session {session_id}: {e}")
            return None

    # =========================================================================
    # Session creation
    # =========================================================================

    def start_session_from_template(self, user_id: str, template_id: str) -> Optional[str]:
        logger.info(f"Starting workout session from template {template_id}")
        try:
            result = self._client.rpc(
                START_SESSION_RPC,
                {"p_user_id": user_id, "p_template_id": template_id},
            ).execute()
        except Exception as e:
            logger.error(f"Failed to start workout session: {e}")
            raise SessionPersistenceError(str(e)) from e

        session_id = result.data
        if isinstance(session_id, list):
            session_id = session_id[0] if session_id else None
        if isinstance(session_id, dict):
            session_id = session_id.get(START_SESSION_RPC) or session_id.get("id")
        if not session_id:
            return None
        logger.info(f"Workout session created: {session_id}")
        return str(session_id)

    def start_manual_session(
        self,
        user_id: str,
        workout_name: str,
        workout_type: str,
        exercises: List[Dict[str, Any]],
    ) -> Optional[str]:
        session_id: Optional[str] = None
        try:
            session_result = self._client.table(SESSIONS_TABLE).insert({
                "user_id": user_id,
                "template_id": None,
                "workout_name": workout_name,
                "workout_type": workout_type,
                "status": "IN_PROGRESS",
                "started_at": _now_iso(),
            }).execute()
            if not session_result.data:
                return None
            session_id = str(session_result.data[0]["id"])

            exercise_rows = [
                {
                    "session_id": session_id,
                    "exercise_id": item["id"],
                    "exercise_name": item["name"],
                    "sort_order": index,
                    "status": "NOT_STARTED",
                    "target_sets": item.get("target_sets", 3),
                    "target_reps": str(item.get("target_reps", "10")),
                    "rest_seconds": item.get("rest_seconds", 60),
                }
                for index, item in enumerate(exercises)
            ]
            exercises_result = self._client.table(EXERCISES_TABLE).insert(exercise_rows).execute()
            created = exercises_result.data or []
            if len(created) != len(exercise_rows):
                raise SessionPersistenceError(
                    f"Inserted {len(created)} of {len(exercise_rows)} exercises"
                )

            set_rows = []
            for item, exercise_row in zip(exercises, created):
                reps = parse_target_reps(item.get("target_reps"))
                for set_number in range(1, int(item.get("target_sets", 3)) + 1):
                    set_rows.append({
                        "session_exercise_id": exercise_row["id"],
                        "set_number": set_number,
                        "weight_kg": 0,
                        "reps": reps,
                        "is_completed": False,
                    })
            if set_rows:
                self._client.table(SETS_TABLE).insert(set_rows).execute()

            logger.info(
                f"Manual session {session_id} created with {len(created)} exercise(s) "
                f"and {len(set_rows)} set(s)"
            )
            return session_id

        except Exception as e:
            logger.error(f"Failed to create manual session for user {user_id}: {e}")
            if session_id:
                # Exercises and sets cascade
                self.delete_session(session_id)
            if isinstance(e, SessionPersistenceError):
                raise
            raise SessionPersistenceError(str(e)) from e

    # =========================================================================
    # Session writes
    # =========================================================================

    def update_set(self, set_id: str, updates: Dict[str, Any]) -> bool:
        try:
            self._client.table(SETS_TABLE).update(updates).eq("id", set_id).execute()
            return True
        except Exception as e:
            logger.error(f"Failed to update set {set_id}: {e}")
            return False

    def complete_session(
        self,
        session_id: str,
        duration_seconds: int,
        total_volume_kg: float,
    ) -> bool:
        try:
            self._client.table(SESSIONS_TABLE).update({
                "status": "COMPLETED",
                "completed_at": _now_iso(),
                "duration_seconds": duration_seconds,
                "total_volume_kg": total_volume_kg,
            }).eq("id", session_id).execute()
            logger.info(f"Session {session_id} completed")
            return True
        except Exception as e:
            logger.error(f"Failed to complete session {session_id}: {e}")
            return False

    def cancel_session(self, session_id: str) -> bool:
        try:
            self._client.table(SESSIONS_TABLE).update({
                "status": "CANCELLED",
            }).eq("id", session_id).execute()
            logger.info(f"Session {session_id} cancelled")
            return True
        except Exception as e:
            logger.error(f"Failed to cancel session {session_id}: {e}")
            return False

    def delete_session(self, session_id: str) -> bool:
        try:
            result = self._client.table(SESSIONS_TABLE).delete().eq("id", session_id).execute()
            if result.data:
                logger.info(f"Session {session_id} deleted")
                return True
            logger.warning(f"No session found with id {session_id} (0 rows deleted)")
            return False
        except Exception as e:
            logger.error(f"Failed to delete session {session_id}: {e}")
            return False

    # =========================================================================
    # Templates and history
    # =========================================================================

    def get_templates(self, user_id: str) -> List[Dict[str, Any]]:
        try:
            result = (
                self._client.table(TEMPLATES_TABLE)
                .select("*")
                .or_(f"user_id.is.null,user_id.eq.{user_id}")
                .order("created_at", desc=True)
                .execute()
            )
            return result.data if result.data else []
        except Exception as e:
            logger.error(f"Failed to get templates: {e}")
            return []

    def get_template_with_exercises(self, template_id: str) -> Optional[Dict[str, Any]]:
        try:
            template_result = (
                self._client.table(TEMPLATES_TABLE)
                .select("*")
                .eq("id", template_id)
                .limit(1)
                .execute()
            )
            if not template_result.data:
                return None
            exercises_result = (
                self._client.table(TEMPLATE_EXERCISES_TABLE)
                .select("*")
                .eq("template_id", template_id)
                .order("sort_order")
                .execute()
            )
            return {
                "template": template_result.data[0],
                "exercises": exercises_result.data or [],
            }
        except Exception as e:
            logger.error(f"Failed to get template {template_id}: {e}")
            return None

    def get_workout_history(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        try:
            result = (
                self._client.table(SESSIONS_TABLE)
                .select(f"*, {EXERCISES_TABLE}(*, {SETS_TABLE}(*))")
                .eq("user_id", user_id)
                .eq("status", "COMPLETED")
                .order("completed_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to get workout history: {e}")
            return []

        rows = []
        for row in result.data or []:
            row = dict(row)
            exercises = row.pop(EXERCISES_TABLE, None) or []
            row["exercises"] = [_with_sets(e) for e in exercises]
            rows.append(row)
        return rows
