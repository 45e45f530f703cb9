"""Unit tests for the access-code lockout limiter."""

from peer360.security.rate_limit import AccessCodeRateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _limiter(clock: FakeClock) -> AccessCodeRateLimiter:
    return AccessCodeRateLimiter(
        max_attempts=3, window_seconds=60, lockout_seconds=300, clock=clock
    )


def test_fresh_identifier_is_allowed():
    limiter = _limiter(FakeClock())
    status = limiter.check("1.2.3.4")
    assert status.allowed is True
    assert status.remaining_attempts == 3


def test_lockout_after_max_failures():
    clock = FakeClock()
    limiter = _limiter(clock)
    assert limiter.record_failure("ip").remaining_attempts == 2
    assert limiter.record_failure("ip").remaining_attempts == 1
    locked = limiter.record_failure("ip")
    assert locked.allowed is False
    assert locked.retry_after_seconds == 300

    clock.now += 100
    status = limiter.check("ip")
    assert status.allowed is False
    assert status.retry_after_seconds == 200


def test_lockout_expires():
    clock = FakeClock()
    limiter = _limiter(clock)
    for _ in range(3):
        limiter.record_failure("ip")
    clock.now += 301
    assert limiter.check("ip").allowed is True


def test_window_expiry_resets_count():
    clock = FakeClock()
    limiter = _limiter(clock)
    limiter.record_failure("ip")
    limiter.record_failure("ip")
    clock.now += 61
    assert limiter.record_failure("ip").remaining_attempts == 2


def test_reset_and_isolation():
    limiter = _limiter(FakeClock())
    for _ in range(3):
        limiter.record_failure("a")
    assert limiter.check("a").allowed is False
    assert limiter.check("b").allowed is True
    limiter.reset("a")
    assert limiter.check("a").allowed is True


def test_hit_counts_before_the_attempt():
    clock = FakeClock()
    limiter = _limiter(clock)
    results = [limiter.hit("ip") for _ in range(10)]
    assert [r.allowed for r in results] == [True, True, True] + [False] * 7
    assert [r.remaining_attempts for r in results[:3]] == [2, 1, 0]
    assert results[3].retry_after_seconds == 300


def test_hit_then_reset_on_success():
    limiter = _limiter(FakeClock())
    limiter.hit("ip")
    limiter.hit("ip")
    limiter.reset("ip")
    assert limiter.hit("ip").remaining_attempts == 2
