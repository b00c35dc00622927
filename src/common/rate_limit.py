"""Process-local fixed-window rate limiting.

Counters live in the memory of the current process: every worker has its own
window, so the effective limit scales with the number of processes.
"""

import threading
import typing as t
from dataclasses import dataclass
from datetime import datetime, timedelta

from django.http import HttpRequest
from django.utils import timezone

SWEEP_INTERVAL = timedelta(seconds=60)


@dataclass(frozen=True)
class RateLimitRule:
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    remaining: int
    reset_at: datetime


@dataclass
class _Window:
    count: int
    reset_at: datetime


RATE_LIMITS: dict[str, RateLimitRule] = {
    "api": RateLimitRule(limit=100, window_seconds=60),
    "auth": RateLimitRule(limit=10, window_seconds=60),
    "rsvp": RateLimitRule(limit=5, window_seconds=60),
    "invites": RateLimitRule(limit=20, window_seconds=60),
    "webhooks": RateLimitRule(limit=1000, window_seconds=60),
}


class RateLimiter:
    """A map of ``key -> (count, reset_at)`` counters."""

    def __init__(self) -> None:
        """Start with no windows."""
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._last_sweep = timezone.now()

    def check(self, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        """Count one hit against ``key`` and report whether it is within the limit.

        The first hit of a window (or the first after it expired) opens a new window.
        Hits beyond ``limit`` are refused until the window resets.
        """
        now = timezone.now()
        with self._lock:
            self._maybe_sweep(now)
            window = self._windows.get(key)
            if window is None or window.reset_at < now:
                window = _Window(count=1, reset_at=now + timedelta(seconds=window_seconds))
                self._windows[key] = window
                return RateLimitResult(success=True, remaining=limit - 1, reset_at=window.reset_at)

            window.count += 1
            if window.count > limit:
                return RateLimitResult(success=False, remaining=0, reset_at=window.reset_at)
            return RateLimitResult(success=True, remaining=limit - window.count, reset_at=window.reset_at)

    def check_rule(self, key: str, rule: RateLimitRule) -> RateLimitResult:
        """Shortcut for :meth:`check` with a :class:`RateLimitRule`."""
        return self.check(key, rule.limit, rule.window_seconds)

    def sweep(self, now: datetime | None = None) -> int:
        """Drop expired windows and return how many were removed."""
        with self._lock:
            return self._sweep(now or timezone.now())

    def reset(self) -> None:
        """Forget every window."""
        with self._lock:
            self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)

    def _sweep(self, now: datetime) -> int:
        expired = [key for key, window in self._windows.items() if window.reset_at < now]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def _maybe_sweep(self, now: datetime) -> None:
        if now - self._last_sweep >= SWEEP_INTERVAL:
            self._sweep(now)
            self._last_sweep = now


rate_limiter = RateLimiter()


def get_client_ip(request: HttpRequest) -> str:
    """Return the originating client address.

    Takes the first hop of ``X-Forwarded-For``, then ``X-Real-IP``, then falls back to loopback.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return t.cast(str, forwarded.split(",")[0].strip())
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return t.cast(str, real_ip)
    return "127.0.0.1"
