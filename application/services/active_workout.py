"""
Active workout session tracker.

Holds the single in-memory copy of a user's in-progress workout and keeps it
in step with the session repository. User actions are applied to local state
first; the matching remote write happens afterwards, so callers never wait on
a round-trip to see their change.

State moves {no session} -> {loading} -> {active session} -> {no session},
driven by load/start/cancel/complete. All mutations run on the event loop;
repository calls run on a worker thread pool because the Supabase client is
blocking.
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from application.exceptions import NoActiveUserError, WorkoutUnavailableError
from application.ports import WorkoutSessionRepository
from application.services.set_sync import SetSyncPolicy, SetSyncQueue, SetUpdate
from domain.converters import db_payload_to_graph, db_row_to_session
from domain.models import (
    ExerciseStatus,
    ManualExercise,
    SessionExercise,
    WorkoutSession,
)
from domain.services.workout_stats import (
    calculate_session_volume,
    derive_exercise_status,
    session_duration_seconds,
)

logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = timedelta(hours=24)

UserProvider = Callable[[], Optional[str]]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TrackerPhase(str, Enum):
    """Coarse tracker state."""

    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"


@dataclass
class ActiveWorkoutState:
    """Everything the tracker knows about the active session."""

    session_id: Optional[str] = None
    session: Optional[WorkoutSession] = None
    exercises: List[SessionExercise] = field(default_factory=list)
    is_loading: bool = False
    is_initialized: bool = False


@dataclass
class CompletedWorkout:
    """Final numbers of a completed session."""

    session_id: str
    duration_seconds: int
    total_volume_kg: float
    persisted: bool


class ActiveWorkoutTracker:
    """
    In-memory source of truth for one user's active workout.

    Build one per user for the lifetime of the application and pass it to
    whatever needs it (see ActiveWorkoutRegistry).

    Usage:
        tracker = ActiveWorkoutTracker(repo, lambda: "user-123")
        await tracker.load_active_session()
        await tracker.start_workout("template-push-a")
        tracker.update_set_completion("set-1", True, weight=100, reps=5)
        result = await tracker.complete_workout()
    """

    def __init__(
        self,
        repo: WorkoutSessionRepository,
        user_provider: UserProvider,
        *,
        stale_after: Optional[timedelta] = DEFAULT_STALE_AFTER,
        set_sync_policy: Optional[SetSyncPolicy] = None,
        executor: Optional[ThreadPoolExecutor] = None,
        clock: Clock = utc_now,
    ):
        """
        Args:
            repo: Session persistence (injected)
            user_provider: Returns the signed-in user id, or None
            stale_after: Open sessions older than this are cancelled on load;
                None disables the check
            set_sync_policy: Retry policy for background set writes
            executor: Pool for blocking repository calls; one is created
                (and owned) when omitted
            clock: Current time, timezone-aware
        """
        self._repo = repo
        self._current_user = user_provider
        self._stale_after = stale_after
        self._sync_queue = SetSyncQueue(set_sync_policy)
        self._clock = clock

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="active_workout_"
        )

        self._state = ActiveWorkoutState()
        self._epoch = 0
        self._sync_tasks: Set[asyncio.Task] = set()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def session_id(self) -> Optional[str]:
        return self._state.session_id

    @property
    def session(self) -> Optional[WorkoutSession]:
        return self._state.session

    @property
    def exercises(self) -> List[SessionExercise]:
        return list(self._state.exercises)

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def is_initialized(self) -> bool:
        return self._state.is_initialized

    @property
    def phase(self) -> TrackerPhase:
        if self._state.is_loading:
            return TrackerPhase.LOADING
        if self._state.session_id:
            return TrackerPhase.ACTIVE
        return TrackerPhase.IDLE

    @property
    def pending_set_updates(self) -> List[SetUpdate]:
        """Set writes that exhausted their retries and await the next flush."""
        return self._sync_queue.pending

    def _reset(self) -> None:
        self._state = ActiveWorkoutState(is_initialized=True)

    def _bump(self) -> int:
        # Results of an operation are only applied while its epoch is current
        self._epoch += 1
        return self._epoch

    async def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, partial(fn, *args))

    # =========================================================================
    # Loading
    # =========================================================================

    async def load_active_session(self) -> None:
        """
        Populate state from the user's open session, or clear it.

        Never raises: failures are logged and leave no active session.
        Open sessions older than the stale threshold are cancelled.
        """
        user_id = self._current_user()
        if not user_id:
            logger.debug("load_active_session skipped: no signed-in user")
            return

        epoch = self._bump()
        self._state.is_loading = True

        try:
            await self._flush_pending_sets()

            row = await self._run(self._repo.get_active_session, user_id)
            if epoch != self._epoch:
                return
            if row is None:
                self._reset()
                return

            session = db_row_to_session(row)
            if self._is_stale(session):
                logger.info(
                    f"Found stale session {session.id} started at "
                    f"{session.started_at.isoformat()}, cancelling it"
                )
                cancelled = await self._run(self._repo.cancel_session, session.id)
                if not cancelled:
                    logger.warning(f"Could not cancel stale session {session.id}")
                if epoch == self._epoch:
                    self._reset()
                return

            payload = await self._run(self._repo.get_session_with_exercises, session.id)
            if epoch != self._epoch:
                return
            exercises = db_payload_to_graph(payload).exercises if payload else []
            self._state = ActiveWorkoutState(
                session_id=session.id,
                session=session,
                exercises=exercises,
                is_loading=False,
                is_initialized=True,
            )
            logger.info(
                f"Loaded active session {session.id} with {len(exercises)} exercise(s)"
            )

        except Exception as e:
            logger.exception(f"Failed to load active session: {e}")
            if epoch == self._epoch:
                self._reset()

    async def refresh_session(self) -> None:
        """Re-fetch the active session's exercises; load one if there is none."""
        session_id = self._state.session_id
        if not session_id or not self._current_user():
            await self.load_active_session()
            return

        try:
            await self._flush_pending_sets()
            payload = await self._run(self._repo.get_session_with_exercises, session_id)
            if payload and self._state.session_id == session_id:
                self._state.exercises = db_payload_to_graph(payload).exercises
        except Exception as e:
            logger.exception(f"Failed to refresh session {session_id}: {e}")

    def _is_stale(self, session: WorkoutSession) -> bool:
        if self._stale_after is None:
            return False
        age = session_duration_seconds(session.started_at, now=self._clock())
        return age > self._stale_after.total_seconds()

    # =========================================================================
    # Starting
    # =========================================================================

    def _require_user(self) -> str:
        user_id = self._current_user()
        if not user_id:
            raise NoActiveUserError()
        return user_id

    async def start_workout(self, template_id: str) -> str:
        """
        Start a new session from a template and load it.

        Returns:
            The new session id

        Raises:
            NoActiveUserError: No signed-in user; state is untouched
            WorkoutUnavailableError: The session could not be created
        """
        user_id = self._require_user()
        logger.info(f"Starting workout from template {template_id} for user {user_id}")
        return await self._start(
            partial(self._repo.start_session_from_template, user_id, template_id),
            label=f"template {template_id}",
        )

    async def start_manual_workout(
        self,
        name: str,
        exercises: Iterable[Union[ManualExercise, Dict[str, Any]]],
        workout_type: str = "manual",
    ) -> str:
        """
        Start a session from a user-picked exercise list.

        Raises:
            NoActiveUserError: No signed-in user; state is untouched
            ValueError: Blank name or no exercises; state is untouched
            WorkoutUnavailableError: The session could not be created
        """
        user_id = self._require_user()

        name = (name or "").strip()
        if not name:
            raise ValueError("Workout name is required")
        items = [
            e if isinstance(e, ManualExercise) else ManualExercise.model_validate(e)
            for e in exercises
        ]
        if not items:
            raise ValueError("At least one exercise is required")

        logger.info(
            f"Starting {workout_type} workout '{name}' with {len(items)} exercise(s)"
        )
        return await self._start(
            partial(
                self._repo.start_manual_session,
                user_id,
                name,
                workout_type,
                [item.model_dump() for item in items],
            ),
            label=f"manual workout '{name}'",
        )

    async def _start(self, create: Callable[[], Optional[str]], *, label: str) -> str:
        epoch = self._bump()
        # Drop whatever was shown before so old exercises never leak into the new session
        self._state = ActiveWorkoutState(is_loading=True)

        try:
            session_id = await self._run(create)
        except Exception as e:
            logger.exception(f"Failed to start {label}: {e}")
            if epoch == self._epoch:
                self._state.is_loading = False
            raise WorkoutUnavailableError(f"Could not start {label}") from e

        if not session_id:
            logger.error(f"Failed to start {label}: no session created")
            if epoch == self._epoch:
                self._state.is_loading = False
            raise WorkoutUnavailableError(f"Could not start {label}")

        session_id = str(session_id)
        logger.info(f"New session created: {session_id}")

        session: Optional[WorkoutSession] = None
        exercises: List[SessionExercise] = []
        try:
            payload = await self._run(self._repo.get_session_with_exercises, session_id)
            if payload:
                graph = db_payload_to_graph(payload)
                session, exercises = graph.session, graph.exercises
            else:
                logger.warning(f"Session {session_id} created but could not be loaded")
        except Exception as e:
            logger.exception(f"Failed to load new session {session_id}: {e}")

        if epoch == self._epoch:
            self._state = ActiveWorkoutState(
                session_id=session_id,
                session=session,
                exercises=exercises,
                is_loading=False,
                is_initialized=True,
            )
        return session_id

    # =========================================================================
    # Closing
    # =========================================================================

    async def cancel_workout(self) -> bool:
        """
        Cancel the active session.

        Local state is cleared before the remote call; on remote failure
        the tracker re-loads instead of restoring what it cleared.

        Returns:
            True if the backend confirmed the cancel, False otherwise
            (including when there was nothing to cancel)
        """
        session_id = self._state.session_id
        if not session_id:
            return False

        epoch = self._bump()
        self._reset()

        ok = await self._close_remote(self._repo.cancel_session, session_id)
        if ok:
            logger.info(f"Session {session_id} cancelled")
        elif epoch == self._epoch:
            await self.load_active_session()
        return ok

    async def complete_workout(self) -> Optional[CompletedWorkout]:
        """
        Complete the active session.

        Duration and total volume are computed from local state, local state
        is cleared, then the backend is told. On remote failure the tracker
        re-loads instead of restoring what it cleared.

        Returns:
            Final numbers, or None if no session was active
        """
        session_id = self._state.session_id
        if not session_id:
            logger.info("No session to complete")
            return None

        duration = self.elapsed_seconds()
        volume = self.total_volume()
        logger.info(
            f"Completing session {session_id}: duration={duration}s volume={volume}kg"
        )

        epoch = self._bump()
        self._reset()

        ok = await self._close_remote(
            self._repo.complete_session, session_id, duration, volume
        )
        if ok:
            logger.info(f"Session {session_id} completed")
        elif epoch == self._epoch:
            # A newer start or load owns the state now
            await self.load_active_session()

        return CompletedWorkout(
            session_id=session_id,
            duration_seconds=duration,
            total_volume_kg=volume,
            persisted=ok,
        )

    async def _close_remote(self, fn: Callable[..., bool], *args: Any) -> bool:
        try:
            ok = bool(await self._run(fn, *args))
        except Exception as e:
            logger.exception(f"Failed to close session {args[0]}: {e}")
            return False
        if not ok:
            logger.error(f"Backend refused to close session {args[0]}")
        return ok

    # =========================================================================
    # Optimistic updates
    # =========================================================================

    def update_exercise_status(self, exercise_id: str, status: ExerciseStatus) -> None:
        """
        Set an exercise's status locally.

        No remote write: the backend derives exercise status from its sets.
        """
        if not self._state.session_id:
            return
        status = ExerciseStatus(status)
        self._state.exercises = [
            ex.model_copy(update={"status": status}) if ex.exercise_id == exercise_id else ex
            for ex in self._state.exercises
        ]

    def update_set_completion(
        self,
        set_id: str,
        is_completed: bool,
        weight: Optional[float] = None,
        reps: Optional[int] = None,
    ) -> bool:
        """
        Log a set locally and sync it in the background.

        Local state changes before this returns; the remote write is
        scheduled on the running loop and not awaited. Omitted weight/reps
        keep their current values.

        Returns:
            True if the set was found in local state
        """
        if weight is not None and weight < 0:
            raise ValueError(f"weight must be >= 0, got {weight}")
        if reps is not None and reps < 0:
            raise ValueError(f"reps must be >= 0, got {reps}")

        found = False
        exercises = []
        for ex in self._state.exercises:
            target = ex.find_set(set_id)
            if target is None:
                exercises.append(ex)
                continue
            found = True
            changes: Dict[str, Any] = {"is_completed": is_completed}
            if weight is not None:
                changes["weight_kg"] = float(weight)
            if reps is not None:
                changes["reps"] = int(reps)
            updated = target.model_copy(update=changes)
            sets = [updated if s.id == set_id else s for s in ex.sets]
            exercises.append(
                ex.model_copy(
                    update={"sets": sets, "status": derive_exercise_status(sets, ex.status)}
                )
            )
        self._state.exercises = exercises

        if not found:
            logger.warning(f"Set {set_id} not in local state; syncing anyway")

        update = SetUpdate(set_id, is_completed, weight, reps)
        task = asyncio.get_running_loop().create_task(
            self._sync_queue.push(update, self._write_set)
        )
        self._sync_tasks.add(task)
        task.add_done_callback(self._sync_tasks.discard)
        return found

    async def _write_set(self, set_id: str, row: Dict[str, Any]) -> bool:
        return bool(await self._run(self._repo.update_set, set_id, row))

    async def _flush_pending_sets(self) -> None:
        if self._sync_queue.has_pending():
            await self._sync_queue.flush(self._write_set)

    # =========================================================================
    # Lookups and derived values
    # =========================================================================

    def get_exercise_by_id(self, exercise_id: str) -> Optional[SessionExercise]:
        """Find an exercise by catalog id."""
        for ex in self._state.exercises:
            if ex.exercise_id == exercise_id:
                return ex
        return None

    def get_exercise_status(self, exercise_id: str) -> ExerciseStatus:
        """Status of an exercise; NOT_STARTED when it is unknown."""
        ex = self.get_exercise_by_id(exercise_id)
        return ex.status if ex else ExerciseStatus.NOT_STARTED

    def total_volume(self) -> float:
        """Sum of weight x reps over completed sets of the active session."""
        return calculate_session_volume(self._state.exercises)

    def elapsed_seconds(self, now: Optional[datetime] = None) -> int:
        """Seconds since the active session started; 0 without one."""
        session = self._state.session
        if session is None:
            return 0
        return session_duration_seconds(
            session.started_at, session.completed_at, now=now or self._clock()
        )

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def wait_for_pending_sync(self) -> None:
        """Wait for in-flight background set writes."""
        if self._sync_tasks:
            await asyncio.gather(*list(self._sync_tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Finish background writes and release the worker pool if owned."""
        await self.wait_for_pending_sync()
        if self._owns_executor:
            self._executor.shutdown(wait=False)
