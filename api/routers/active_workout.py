"""
Active workout router.

Endpoints drive the signed-in user's long-lived ActiveWorkoutTracker:
- GET  /active-workout - Current state (loads the open session on first use)
- POST /active-workout/refresh - Re-fetch from the backend
- POST /active-workout/start - Start from a template
- POST /active-workout/manual - Start from a picked exercise list
- POST /active-workout/cancel - Cancel the active session
- POST /active-workout/complete - Complete the active session
- PATCH /active-workout/exercises/{exercise_id} - Local exercise status
- PATCH /active-workout/sets/{set_id} - Log a set (synced in the background)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_active_workout_tracker
from api.schemas.active_workout import (
    ActiveWorkoutResponse,
    CancelWorkoutResponse,
    CompleteWorkoutResponse,
    ExerciseStatusUpdate,
    SetCompletionResponse,
    SetCompletionUpdate,
    StartManualWorkoutRequest,
    StartWorkoutRequest,
    StartWorkoutResponse,
)
from application.exceptions import NoActiveUserError, WorkoutUnavailableError
from application.services import ActiveWorkoutTracker
from domain.services.workout_stats import format_duration, format_volume

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/active-workout",
    tags=["Active Workout"],
)


def _state(tracker: ActiveWorkoutTracker) -> ActiveWorkoutResponse:
    elapsed = tracker.elapsed_seconds()
    return ActiveWorkoutResponse(
        phase=tracker.phase.value,
        session_id=tracker.session_id,
        session=tracker.session,
        exercises=tracker.exercises,
        elapsed_seconds=elapsed,
        elapsed_display=format_duration(elapsed),
        total_volume_kg=tracker.total_volume(),
        pending_set_updates=len(tracker.pending_set_updates),
    )


# =============================================================================
# State
# =============================================================================


@router.get("", response_model=ActiveWorkoutResponse)
async def get_active_workout(
    tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
):
    """Return the current tracker state."""
    return _state(tracker)


@router.post("/refresh", response_model=ActiveWorkoutResponse)
async def refresh_active_workout(
    tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
):
    """Re-fetch the active session from the backend."""
    await tracker.refresh_session()
    return _state(tracker)


# =============================================================================
# Start
# =============================================================================


@router.post("/start", response_model=StartWorkoutResponse, status_code=status.HTTP_201_CREATED)
async def start_workout(
    request: StartWorkoutRequest,
    tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
):
    """
    Start a session from a template.

    Returns:
        New session id and the loaded state

    Raises:
        HTTPException: 503 if the session could not be created
    """
    try:
        session_id = await tracker.start_workout(request.template_id)
    except NoActiveUserError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except WorkoutUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return StartWorkoutResponse(session_id=session_id, state=_state(tracker))


@router.post("/manual", response_model=StartWorkoutResponse, status_code=status.HTTP_201_CREATED)
async def start_manual_workout(
    request: StartManualWorkoutRequest,
    tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
):
    """
    Start a session from a user-picked exercise list.

    Raises:
        HTTPException: 422 for a blank name or no exercises,
            503 if the session could not be created
    """
    try:
        session_id = await tracker.start_manual_workout(
            request.name,
            request.exercises,
            workout_type=request.workout_type,
        )
    except NoActiveUserError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except WorkoutUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return StartWorkoutResponse(session_id=session_id, state=_state(tracker))


# =============================================================================
# Close
# =============================================================================


@router.post("/cancel", response_model=CancelWorkoutResponse)
async def cancel_workout(
    tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
):
    """Cancel the active session. `cancelled` is False if the backend refused."""
    cancelled = await tracker.cancel_workout()
    return CancelWorkoutResponse(cancelled=cancelled, state=_state(tracker))


@router.post("/complete", response_model=CompleteWorkoutResponse)
async def complete_workout(
    tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
):
    """
    Complete the active session.

    Raises:
        HTTPException: 404 if no session is active
    """
    result = await tracker.complete_workout()
    if result is None:
        raise HTTPException(status_code=404, detail="No active workout to complete")
    return CompleteWorkoutResponse(
        session_id=result.session_id,
        duration_seconds=result.duration_seconds,
        duration_display=format_duration(result.duration_seconds),
        total_volume_kg=result.total_volume_kg,
        volume_display=format_volume(result.total_volume_kg),
        persisted=result.persisted,
    )


# =============================================================================
# Updates
# =============================================================================


@router.patch("/exercises/{exercise_id}", response_model=ActiveWorkoutResponse)
async def update_exercise_status(
    exercise_id: str,
    request: ExerciseStatusUpdate,
    tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
):
    """Set an exercise's status locally. Nothing is written to the backend."""
    tracker.update_exercise_status(exercise_id, request.status)
    return _state(tracker)


@router.patch(
    "/sets/{set_id}",
    response_model=SetCompletionResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def update_set_completion(
    set_id: str,
    request: SetCompletionUpdate,
    tracker: ActiveWorkoutTracker = Depends(get_active_workout_tracker),
):
    """
    Log a set.

    The change is visible in the returned state immediately; the backend
    write happens in the background, hence 202.
    """
    found = tracker.update_set_completion(
        set_id,
        request.is_completed,
        weight=request.weight,
        reps=request.reps,
    )
    return SetCompletionResponse(set_id=set_id, found=found, state=_state(tracker))
