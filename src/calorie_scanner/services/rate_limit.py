"""Per-instance request throttling."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class RateLimiter(Protocol):
    """Interface for request throttles keyed by caller."""

    def hit(self, key: str) -> bool:
        """Record a request and return True when it exceeds the ceiling."""


@dataclass
class _Window:
    count: int
    started_at: datetime


@dataclass
class InMemoryRateLimiter(RateLimiter):
    """Fixed-window limiter held in process memory.

    Counters are not shared between server instances, so the ceiling is a
    best-effort per-instance throttle. Expired windows are dropped whenever a
    new window opens, so memory tracks recently active callers only.
    """

    limit: int
    window_seconds: int
    _windows: dict[str, _Window]

    def __init__(self, limit: int = 10, window_seconds: int = 60) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._windows = {}

    def hit(self, key: str) -> bool:
        """Count a request, resetting the window lazily once it has elapsed."""
        now = datetime.now(tz=UTC)
        window = self._windows.get(key)
        if window is None or self._expired(window, now):
            self._evict_expired(now)
            self._windows[key] = _Window(count=1, started_at=now)
            return False
        if window.count >= self.limit:
            return True
        window.count += 1
        return False

    def _expired(self, window: _Window, now: datetime) -> bool:
        return now - window.started_at > timedelta(seconds=self.window_seconds)

    def _evict_expired(self, now: datetime) -> None:
        stale = [
            key for key, window in self._windows.items() if self._expired(window, now)
        ]
        for key in stale:
            del self._windows[key]
