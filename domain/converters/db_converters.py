"""
Converters: Database row format <-> session domain models.

Provides conversion between Supabase rows and the session models.

Database schema:
- workout_sessions: id, user_id, template_id, workout_name, workout_type,
  status, started_at, completed_at, duration_seconds, total_volume_kg, notes
- session_exercises: id, session_id, exercise_id, exercise_name, sort_order,
  status, target_sets, target_reps, rest_seconds, notes
- session_sets: id, session_exercise_id, set_number, weight_kg, reps,
  is_completed
- workout_templates / template_exercises: read-only definitions
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from domain.models import (
    ExerciseStatus,
    SessionExercise,
    SessionGraph,
    SessionSet,
    SessionStatus,
    TemplateExercise,
    WorkoutSession,
    WorkoutSummary,
    WorkoutTemplate,
)
from domain.services.workout_stats import (
    calculate_session_volume,
    calculate_workout_breakdown,
    session_duration_seconds,
)

logger = logging.getLogger(__name__)

_DATETIME = TypeAdapter(datetime)


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse datetime from various formats."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        # PostgREST trims trailing zeros from fractional seconds
        try:
            return _DATETIME.validate_python(value)
        except ValidationError:
            return None
    return None


def _str_or_none(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _status(value: Any, enum_cls, default):
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(f"Unknown {enum_cls.__name__} value: {value!r}")
        return default


def db_row_to_set(row: Dict[str, Any]) -> SessionSet:
    """Convert a session_sets row."""
    return SessionSet(
        id=str(row["id"]),
        session_exercise_id=str(row.get("session_exercise_id", "")),
        set_number=row.get("set_number") or 1,
        weight_kg=float(row.get("weight_kg") or 0),
        reps=int(row.get("reps") or 0),
        is_completed=bool(row.get("is_completed", False)),
    )


def db_row_to_exercise(row: Dict[str, Any]) -> SessionExercise:
    """
    Convert a session_exercises row, including nested `sets` rows if present.

    Sets are ordered by set_number.
    """
    sets = [db_row_to_set(s) for s in row.get("sets") or []]
    sets.sort(key=lambda s: s.set_number)
    return SessionExercise(
        id=str(row["id"]),
        session_id=str(row.get("session_id", "")),
        exercise_id=str(row.get("exercise_id", "")),
        exercise_name=row.get("exercise_name") or "",
        sort_order=row.get("sort_order") or 0,
        status=_status(row.get("status"), ExerciseStatus, ExerciseStatus.NOT_STARTED),
        target_sets=row.get("target_sets"),
        target_reps=_str_or_none(row.get("target_reps")),
        rest_seconds=row.get("rest_seconds"),
        notes=row.get("notes"),
        sets=sets,
    )


def db_row_to_session(row: Dict[str, Any]) -> WorkoutSession:
    """
    Convert a workout_sessions row.

    Raises:
        ValueError: If the row has no parseable started_at.
    """
    started_at = _parse_datetime(row.get("started_at"))
    if started_at is None:
        raise ValueError(f"Session {row.get('id')} has no valid started_at")

    return WorkoutSession(
        id=str(row["id"]),
        user_id=str(row.get("user_id", "")),
        template_id=_str_or_none(row.get("template_id")),
        workout_name=row.get("workout_name") or "",
        workout_type=row.get("workout_type"),
        status=_status(row.get("status"), SessionStatus, SessionStatus.IN_PROGRESS),
        started_at=started_at,
        completed_at=_parse_datetime(row.get("completed_at")),
        duration_seconds=row.get("duration_seconds"),
        total_volume_kg=row.get("total_volume_kg"),
        notes=row.get("notes"),
    )


def db_payload_to_graph(payload: Dict[str, Any]) -> SessionGraph:
    """
    Convert a {"session": row, "exercises": [row, ...]} payload.

    Exercises are ordered by sort_order.
    """
    exercises = [db_row_to_exercise(e) for e in payload.get("exercises") or []]
    exercises.sort(key=lambda e: e.sort_order)
    return SessionGraph(
        session=db_row_to_session(payload["session"]),
        exercises=exercises,
    )


def db_row_to_template(
    row: Dict[str, Any],
    exercise_rows: Optional[List[Dict[str, Any]]] = None,
) -> WorkoutTemplate:
    """Convert a workout_templates row with optional template_exercises rows."""
    exercises = [
        TemplateExercise(
            id=str(e["id"]),
            template_id=str(e.get("template_id", row["id"])),
            exercise_id=str(e.get("exercise_id", "")),
            sort_order=e.get("sort_order") or 0,
            target_sets=e.get("target_sets") or 0,
            target_reps=_str_or_none(e.get("target_reps")),
            rest_seconds=e.get("rest_seconds"),
            notes=e.get("notes"),
        )
        for e in exercise_rows or []
    ]
    exercises.sort(key=lambda e: e.sort_order)
    return WorkoutTemplate(
        id=str(row["id"]),
        user_id=_str_or_none(row.get("user_id")),
        name=row.get("name") or "",
        category=row.get("category"),
        type=row.get("type"),
        estimated_duration=row.get("estimated_duration"),
        exercises=exercises,
    )


def set_update_to_db_row(
    is_completed: bool,
    weight_kg: Optional[float] = None,
    reps: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the session_sets update payload.

    Only supplied fields are included so unchanged columns are not touched.
    """
    row: Dict[str, Any] = {"is_completed": is_completed}
    if weight_kg is not None:
        row["weight_kg"] = weight_kg
    if reps is not None:
        row["reps"] = reps
    return row


def graph_to_summary(graph: SessionGraph) -> WorkoutSummary:
    """
    Summarize a finished session.

    Stored duration and volume win; otherwise they are derived from the
    timestamps and the completed sets.
    """
    session = graph.session
    duration = session.duration_seconds
    if duration is None:
        duration = session_duration_seconds(session.started_at, session.completed_at)
    volume = session.total_volume_kg
    if volume is None:
        volume = calculate_session_volume(graph.exercises)

    return WorkoutSummary(
        session_id=session.id,
        workout_name=session.workout_name,
        date=session.completed_at or session.started_at,
        duration_seconds=duration,
        total_volume_kg=volume,
        exercise_count=len(graph.exercises),
        completed_exercise_count=sum(
            1 for e in graph.exercises if e.status == ExerciseStatus.COMPLETED
        ),
        exercises=calculate_workout_breakdown(graph.exercises),
    )
