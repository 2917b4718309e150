"""
Application services for the workout session service.

- active_workout: the in-memory tracker of a user's in-progress workout
- set_sync: background delivery of logged sets with retry
- registry: one tracker per user for the HTTP layer
"""

from application.services.active_workout import (
    ActiveWorkoutState,
    ActiveWorkoutTracker,
    CompletedWorkout,
    TrackerPhase,
)
from application.services.registry import ActiveWorkoutRegistry
from application.services.set_sync import SetSyncPolicy, SetSyncQueue, SetUpdate

__all__ = [
    "ActiveWorkoutTracker",
    "ActiveWorkoutState",
    "CompletedWorkout",
    "TrackerPhase",
    "ActiveWorkoutRegistry",
    "SetSyncPolicy",
    "SetSyncQueue",
    "SetUpdate",
]
