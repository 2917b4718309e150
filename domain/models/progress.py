"""
Legacy workout-progress entries.

Older app versions stored a `completed_workouts` JSON blob per user whose
entries came in several shapes:

- "workout-2024-05-01"              calendar marker for a day
- "push-a-week-3"                   bare workout id
- {"date": "...", "id": ..., ...}   detailed completion record

Each shape is a variant of `CompletedWorkoutEntry`. Raw data is converted
once, here, by `normalize_completed_workouts`; nothing downstream inspects
the raw blob.
"""

import json
import logging
import re
from datetime import date, datetime
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CALENDAR_MARKER_PREFIX = "workout-"
_MARKER_RE = re.compile(r"^workout-(\d{4}-\d{2}-\d{2})$")


class CalendarMarker(BaseModel):
    """A day marked as trained, with no further detail."""

    kind: Literal["calendar_marker"] = "calendar_marker"
    day: date


class WorkoutReference(BaseModel):
    """A completed workout known only by id; it carries no date."""

    kind: Literal["workout_reference"] = "workout_reference"
    workout_id: str


class DetailedCompletion(BaseModel):
    """A completion record with a date and optional identity."""

    kind: Literal["detailed"] = "detailed"
    day: date
    workout_id: Optional[str] = None
    name: Optional[str] = None


CompletedWorkoutEntry = Annotated[
    Union[CalendarMarker, WorkoutReference, DetailedCompletion],
    Field(discriminator="kind"),
]


def calendar_marker_key(day: date) -> str:
    """Key used by the legacy calendar for a trained day."""
    return f"{CALENDAR_MARKER_PREFIX}{day.isoformat()}"


def entry_day(entry: CompletedWorkoutEntry) -> Optional[date]:
    """The day an entry refers to, if it has one."""
    if isinstance(entry, (CalendarMarker, DetailedCompletion)):
        return entry.day
    return None


def _parse_day(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def normalize_entry(raw: Any) -> Optional[CompletedWorkoutEntry]:
    """
    Convert one raw legacy entry into its variant.

    Returns None for entries that match no known shape.
    """
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        match = _MARKER_RE.match(raw)
        if match:
            day = _parse_day(match.group(1))
            if day is not None:
                return CalendarMarker(day=day)
        return WorkoutReference(workout_id=raw)

    if isinstance(raw, dict):
        day = _parse_day(raw.get("date"))
        if day is None:
            return None
        workout_id = raw.get("id") or raw.get("workoutId") or raw.get("workout_id")
        name = raw.get("name") or raw.get("workoutName") or raw.get("workout_name")
        return DetailedCompletion(
            day=day,
            workout_id=str(workout_id) if workout_id is not None else None,
            name=str(name) if name is not None else None,
        )

    return None


def normalize_completed_workouts(raw: Any) -> List[CompletedWorkoutEntry]:
    """
    Normalize a legacy `completed_workouts` value into typed entries.

    Args:
        raw: JSON string, already-decoded list, or None.

    Returns:
        Entries in their original order; unrecognized items are dropped.
    """
    if raw is None:
        return []

    if isinstance(raw, (bytes, str)):
        if not raw.strip():
            return []
        try:
            raw = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to parse completed workouts blob: {e}")
            return []

    if not isinstance(raw, list):
        logger.warning(
            "Completed workouts blob is a %s, expected a list", type(raw).__name__
        )
        return []

    entries: List[CompletedWorkoutEntry] = []
    for item in raw:
        entry = normalize_entry(item)
        if entry is None:
            logger.debug("Skipping unrecognized progress entry: %r", item)
            continue
        entries.append(entry)
    return entries
