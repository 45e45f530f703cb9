"""Server-side lockout limiter for access-code logins."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class _AttemptRecord:
    attempts: int
    first_attempt: float
    last_attempt: float
    locked_until: float | None = None


@dataclass
class RateLimitStatus:
    """Outcome of a check or a recorded attempt."""

    allowed: bool
    remaining_attempts: int
    retry_after_seconds: float | None = None


@dataclass
class AccessCodeRateLimiter:
    """
    Lock an identifier out after ``max_attempts`` failures inside ``window_seconds``.

    State is held per process and owned by the application instance that
    created it; nothing here is module-global.
    """

    max_attempts: int = 5
    window_seconds: float = 15 * 60
    lockout_seconds: float = 30 * 60
    clock: Callable[[], float] = time.monotonic
    _records: dict[str, _AttemptRecord] = field(default_factory=dict, repr=False)

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        stale = [
            key
            for key, record in self._records.items()
            if record.last_attempt < cutoff
            and (record.locked_until is None or record.locked_until < now)
        ]
        for key in stale:
            del self._records[key]

    def check(self, identifier: str) -> RateLimitStatus:
        """Report whether another attempt is allowed, without recording one."""
        now = self.clock()
        self._prune(now)
        record = self._records.get(identifier)
        if record is None:
            return RateLimitStatus(allowed=True, remaining_attempts=self.max_attempts)

        if record.locked_until is not None and record.locked_until > now:
            return RateLimitStatus(
                allowed=False,
                remaining_attempts=0,
                retry_after_seconds=record.locked_until - now,
            )

        if now - record.first_attempt > self.window_seconds:
            return RateLimitStatus(allowed=True, remaining_attempts=self.max_attempts)

        remaining = self.max_attempts - record.attempts
        return RateLimitStatus(allowed=remaining > 0, remaining_attempts=max(0, remaining))

    def record_failure(self, identifier: str) -> RateLimitStatus:
        """Count a failed attempt; lock the identifier once the limit is reached."""
        now = self.clock()
        self._prune(now)
        record = self._records.get(identifier)

        if record is None or now - record.first_attempt > self.window_seconds:
            self._records[identifier] = _AttemptRecord(
                attempts=1, first_attempt=now, last_attempt=now
            )
            return RateLimitStatus(allowed=True, remaining_attempts=self.max_attempts - 1)

        record.attempts += 1
        record.last_attempt = now
        if record.attempts >= self.max_attempts:
            record.locked_until = now + self.lockout_seconds
            logger.warning("Access code attempts locked out for %.0fs", self.lockout_seconds)
            return RateLimitStatus(
                allowed=False,
                remaining_attempts=0,
                retry_after_seconds=self.lockout_seconds,
            )
        return RateLimitStatus(
            allowed=True, remaining_attempts=self.max_attempts - record.attempts
        )

    def hit(self, identifier: str) -> RateLimitStatus:
        """
        Check and count an attempt in one step, before the attempt is made.

        Nothing here awaits, so concurrent requests from one identifier are
        counted one by one and at most ``max_attempts`` get through per
        window. The attempt that reaches the limit is still allowed; later
        ones are refused until the lockout ends. Call ``reset`` on success.
        """
        status = self.check(identifier)
        if not status.allowed:
            return status
        counted = self.record_failure(identifier)
        return RateLimitStatus(allowed=True, remaining_attempts=counted.remaining_attempts)

    def reset(self, identifier: str) -> None:
        """Forget an identifier, e.g. after a successful login."""
        self._records.pop(identifier, None)

    def clear(self) -> None:
        self._records.clear()
