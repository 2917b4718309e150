"""
Per-user tracker registry.

The HTTP layer serves many users from one process, while a tracker owns the
state of exactly one user's workout. The registry hands out one long-lived
tracker per user and shares a single worker pool between them.
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Callable, Dict, Optional

from application.ports import WorkoutSessionRepository
from application.services.active_workout import (
    DEFAULT_STALE_AFTER,
    ActiveWorkoutTracker,
    Clock,
    utc_now,
)
from application.services.set_sync import SetSyncPolicy

logger = logging.getLogger(__name__)


class ActiveWorkoutRegistry:
    """Lazily builds and caches one ActiveWorkoutTracker per user id."""

    def __init__(
        self,
        repo_factory: Callable[[], WorkoutSessionRepository],
        *,
        stale_after: Optional[timedelta] = DEFAULT_STALE_AFTER,
        set_sync_policy: Optional[SetSyncPolicy] = None,
        max_workers: int = 4,
        clock: Clock = utc_now,
    ):
        self._repo_factory = repo_factory
        self._stale_after = stale_after
        self._set_sync_policy = set_sync_policy
        self._clock = clock
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="active_workout_"
        )
        self._trackers: Dict[str, ActiveWorkoutTracker] = {}

    @classmethod
    def from_settings(
        cls,
        settings,
        repo_factory: Callable[[], WorkoutSessionRepository],
    ) -> "ActiveWorkoutRegistry":
        """Build a registry using the tracker knobs from Settings."""
        return cls(
            repo_factory,
            stale_after=timedelta(hours=settings.stale_session_hours),
            set_sync_policy=SetSyncPolicy(
                max_attempts=settings.set_sync_max_attempts,
                min_wait_seconds=settings.set_sync_min_wait_seconds,
                max_wait_seconds=settings.set_sync_max_wait_seconds,
            ),
            max_workers=settings.tracker_max_workers,
        )

    def __len__(self) -> int:
        return len(self._trackers)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._trackers

    def get(self, user_id: str) -> ActiveWorkoutTracker:
        """Return the tracker for a user, creating it on first use."""
        if not user_id:
            raise ValueError("user_id is required")
        tracker = self._trackers.get(user_id)
        if tracker is None:
            tracker = ActiveWorkoutTracker(
                self._repo_factory(),
                lambda: user_id,
                stale_after=self._stale_after,
                set_sync_policy=self._set_sync_policy,
                executor=self._executor,
                clock=self._clock,
            )
            self._trackers[user_id] = tracker
            logger.debug(f"Created active workout tracker for user {user_id}")
        return tracker

    async def aclose(self) -> None:
        """Drain every tracker's background writes and stop the pool."""
        trackers = list(self._trackers.values())
        self._trackers.clear()
        if trackers:
            await asyncio.gather(*(t.aclose() for t in trackers), return_exceptions=True)
        self._executor.shutdown(wait=False)
        logger.info(f"Closed {len(trackers)} active workout tracker(s)")
