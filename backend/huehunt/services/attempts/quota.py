import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from huehunt.errors import QuotaExceededError
from .daykey import local_day_key
from .store import CounterStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 6
DEFAULT_TTL_SECONDS = 24 * 60 * 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttemptQuotaManager:
    """Per-user, per-local-day submission budget on a shared counter store.

    A counter lives at ``attempts:<user>:<YYYY-MM-DD>``, where the date is the
    user's local day for the supplied UTC offset. It is created by the first
    increment of the day and expires ``ttl_seconds`` later; it is never
    deleted explicitly.

    ``can_submit`` followed by ``record_attempt`` is two separate store round
    trips and is NOT atomic: concurrent submissions from one user can both
    pass the check and push the count past ``max_attempts``. Use
    ``consume_attempt`` / ``try_consume_attempt`` for exactly-once admission.
    """

    def __init__(self, store: CounterStore, max_attempts: int = DEFAULT_MAX_ATTEMPTS,
                 ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Optional[Callable[[], datetime]] = None):
        if max_attempts < 0:
            raise ValueError(f"max_attempts must be non-negative, got {max_attempts}")
        self.store = store
        self.max_attempts = max_attempts
        self.ttl_seconds = ttl_seconds
        self.clock = clock or _utcnow

    @classmethod
    def from_config(cls, store: CounterStore, config, clock=None) -> 'AttemptQuotaManager':
        return cls(
            store,
            max_attempts=int(config.get('MAX_DAILY_ATTEMPTS', DEFAULT_MAX_ATTEMPTS)),
            ttl_seconds=int(config.get('ATTEMPT_TTL_SEC', DEFAULT_TTL_SECONDS)),
            clock=clock,
        )

    def day_key(self, timezone_offset: float) -> str:
        return local_day_key(timezone_offset, self.clock())

    def key_for(self, user_id, timezone_offset: float) -> str:
        return f"attempts:{user_id}:{self.day_key(timezone_offset)}"

    def current_count(self, user_id, timezone_offset: float) -> int:
        return self.store.get(self.key_for(user_id, timezone_offset)) or 0

    def remaining(self, user_id, timezone_offset: float) -> int:
        return max(0, self.max_attempts - self.current_count(user_id, timezone_offset))

    def can_submit(self, user_id, timezone_offset: float) -> bool:
        return self.remaining(user_id, timezone_offset) > 0

    def record_attempt(self, user_id, timezone_offset: float) -> int:
        """Count one attempt and return its ordinal (previous count + 1).

        Does not check the budget; pair with ``can_submit``.
        """
        key = self.key_for(user_id, timezone_offset)
        count = self.store.incr(key)
        self._ensure_expiry(key)
        logger.info(f"[attempt] user={user_id} key={key} count={count}")
        return count

    def consume_attempt(self, user_id, timezone_offset: float) -> int:
        """Atomically admit one attempt and return its ordinal.

        Increments first and rolls back when the new count overshoots the
        budget, so concurrent callers can never be admitted past
        ``max_attempts``. Raises ``QuotaExceededError`` when rejected.
        """
        key = self.key_for(user_id, timezone_offset)
        count = self.store.incr(key)
        self._ensure_expiry(key)
        if count > self.max_attempts:
            self.store.decr(key)
            logger.info(f"[attempt-reject] user={user_id} key={key} max={self.max_attempts}")
            raise QuotaExceededError()
        logger.info(f"[attempt] user={user_id} key={key} count={count}")
        return count

    def try_consume_attempt(self, user_id, timezone_offset: float) -> bool:
        try:
            self.consume_attempt(user_id, timezone_offset)
        except QuotaExceededError:
            return False
        return True

    def _ensure_expiry(self, key: str) -> None:
        # Only the absent -> active transition leaves a key without expiry
        if self.store.ttl(key) == -1:
            self.store.expire(key, self.ttl_seconds)
