"""Tests for the in-memory rate limiter."""

from datetime import UTC, datetime, timedelta

from calorie_scanner.services.rate_limit import InMemoryRateLimiter


def test_allows_up_to_limit_then_blocks() -> None:
    limiter = InMemoryRateLimiter(limit=10, window_seconds=60)

    results = [limiter.hit("user-1") for _ in range(11)]

    assert results[:10] == [False] * 10
    assert results[10] is True


def test_keys_are_independent() -> None:
    limiter = InMemoryRateLimiter(limit=1, window_seconds=60)

    assert limiter.hit("a") is False
    assert limiter.hit("a") is True
    assert limiter.hit("b") is False


def test_window_resets_after_expiry() -> None:
    limiter = InMemoryRateLimiter(limit=1, window_seconds=60)
    limiter.hit("user-1")
    assert limiter.hit("user-1") is True

    limiter._windows["user-1"].started_at = datetime.now(tz=UTC) - timedelta(
        seconds=61
    )

    assert limiter.hit("user-1") is False


def test_expired_windows_are_evicted() -> None:
    limiter = InMemoryRateLimiter(limit=5, window_seconds=60)
    limiter.hit("old-1")
    limiter.hit("old-2")
    limiter.hit("active")
    stale = datetime.now(tz=UTC) - timedelta(seconds=120)
    limiter._windows["old-1"].started_at = stale
    limiter._windows["old-2"].started_at = stale

    limiter.hit("new")

    assert set(limiter._windows) == {"active", "new"}
