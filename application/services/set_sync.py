"""
Background synchronization of logged sets.

Set changes are applied locally first and written to the backend afterwards.
A write is retried with exponential backoff while the backend raises or
reports failure; once the attempts are used up the update is parked in a
pending map (newest write per set wins) and pushed again on the next flush.
Local state is never rolled back.
"""
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from domain.converters import set_update_to_db_row

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 0.5
DEFAULT_MAX_WAIT_SECONDS = 5.0

# (set_id, row) -> success
SetWriter = Callable[[str, Dict[str, Any]], Awaitable[bool]]

_sequence = itertools.count(1)


@dataclass(frozen=True)
class SetSyncPolicy:
    """
    How hard to try before parking a set write.

    max_attempts=1 disables retries; the failed update is still kept pending.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.min_wait_seconds <= 0:
            raise ValueError(
                f"min_wait_seconds must be positive, got {self.min_wait_seconds}"
            )
        if self.max_wait_seconds <= 0:
            raise ValueError(
                f"max_wait_seconds must be positive, got {self.max_wait_seconds}"
            )
        if self.min_wait_seconds > self.max_wait_seconds:
            raise ValueError(
                f"min_wait_seconds ({self.min_wait_seconds}) cannot exceed "
                f"max_wait_seconds ({self.max_wait_seconds})"
            )


@dataclass(frozen=True)
class SetUpdate:
    """A set change waiting to be written."""

    set_id: str
    is_completed: bool
    weight_kg: Optional[float] = None
    reps: Optional[int] = None
    seq: int = field(default_factory=lambda: next(_sequence))

    def to_row(self) -> Dict[str, Any]:
        return set_update_to_db_row(self.is_completed, self.weight_kg, self.reps)


def _give_up(retry_state: RetryCallState) -> bool:
    outcome = retry_state.outcome
    if outcome is not None and outcome.failed:
        logger.error(
            f"Set sync gave up after {retry_state.attempt_number} attempt(s): "
            f"{outcome.exception()}"
        )
    else:
        logger.error(
            f"Set sync gave up after {retry_state.attempt_number} attempt(s): "
            "backend reported failure"
        )
    return False


class SetSyncQueue:
    """
    Retries set writes and keeps the ones that could not be delivered.

    Usage:
        queue = SetSyncQueue(SetSyncPolicy(max_attempts=3))
        ok = await queue.push(SetUpdate("set-1", True, 100, 5), writer)
        ...
        delivered = await queue.flush(writer)
    """

    def __init__(self, policy: Optional[SetSyncPolicy] = None):
        self.policy = policy or SetSyncPolicy()
        self._pending: Dict[str, SetUpdate] = {}
        self._latest_seq: Dict[str, int] = {}
        self._in_flight: Dict[str, int] = {}

    @property
    def pending(self) -> List[SetUpdate]:
        """Updates that exhausted their attempts, oldest first."""
        return sorted(self._pending.values(), key=lambda u: u.seq)

    def has_pending(self) -> bool:
        return bool(self._pending)

    def clear(self) -> None:
        self._pending.clear()
        self._latest_seq.clear()
        self._in_flight.clear()

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=(
                retry_if_exception_type(Exception)
                | retry_if_result(lambda ok: ok is False)
            ),
            stop=stop_after_attempt(self.policy.max_attempts),
            wait=wait_exponential(
                multiplier=self.policy.min_wait_seconds,
                min=self.policy.min_wait_seconds,
                max=self.policy.max_wait_seconds,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            retry_error_callback=_give_up,
        )

    async def push(self, update: SetUpdate, writer: SetWriter) -> bool:
        """
        Write one update, retrying per policy.

        Returns:
            True if the backend accepted it, False if it was parked
        """
        self._latest_seq[update.set_id] = max(
            update.seq, self._latest_seq.get(update.set_id, 0)
        )
        self._in_flight[update.set_id] = self._in_flight.get(update.set_id, 0) + 1
        try:
            ok = bool(await self._retrying()(writer, update.set_id, update.to_row()))
        finally:
            self._in_flight[update.set_id] -= 1
        self._settle(update, ok)
        return ok

    async def flush(self, writer: SetWriter) -> int:
        """
        Try every parked update once.

        Returns:
            Number of updates delivered
        """
        delivered = 0
        for update in self.pending:
            try:
                ok = bool(await writer(update.set_id, update.to_row()))
            except Exception as e:
                logger.warning(f"Pending set {update.set_id} still failing: {e}")
                ok = False
            if ok:
                delivered += 1
            self._settle(update, ok)
        if delivered:
            logger.info(f"Flushed {delivered} pending set update(s)")
        return delivered

    def _settle(self, update: SetUpdate, ok: bool) -> None:
        parked = self._pending.get(update.set_id)
        if ok:
            if parked is not None and parked.seq <= update.seq:
                del self._pending[update.set_id]
            self._forget(update.set_id)
            return
        # A newer write for the same set supersedes this one
        if update.seq < self._latest_seq.get(update.set_id, 0):
            self._forget(update.set_id)
            return
        if parked is None or parked.seq <= update.seq:
            self._pending[update.set_id] = update
            logger.warning(f"Parked set update {update.set_id} for later sync")

    def _forget(self, set_id: str) -> None:
        # Sequence numbers are only needed while a write for the set is unsettled
        if self._in_flight.get(set_id, 0) > 0 or set_id in self._pending:
            return
        self._latest_seq.pop(set_id, None)
        self._in_flight.pop(set_id, None)
