"""
Client-side request budget (requests per minute).

The budget is advisory: it counts dispatched requests and reports how many
remain in the current window, but never blocks a caller.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

__all__ = ["RateLimitStatus", "RequestBudget"]


@dataclass(frozen=True)
class RateLimitStatus:
    available: int
    limit: int
    reset_at: Optional[datetime] = None

    @property
    def exhausted(self) -> bool:
        return self.available <= 0


class RequestBudget:
    """
    Fixed-window counter shared by every call made through one client.

    ``clock`` returns monotonic seconds and exists for tests.
    """

    def __init__(
        self,
        requests_per_minute: int,
        *,
        window_seconds: float = 60.0,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        self.limit = requests_per_minute
        self.window_seconds = window_seconds
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        self._used = 0
        self._window_ends = self._clock() + window_seconds

    def _roll_window(self, now: float) -> None:
        # Caller holds the lock.
        if now >= self._window_ends:
            self._used = 0
            self._window_ends = now + self.window_seconds

    def _snapshot(self, now: float) -> RateLimitStatus:
        remaining = max(self._window_ends - now, 0.0)
        reset_at = datetime.now(timezone.utc) + timedelta(seconds=remaining)
        return RateLimitStatus(
            available=max(self.limit - self._used, 0),
            limit=self.limit,
            reset_at=reset_at,
        )

    def record(self) -> RateLimitStatus:
        """Count one dispatched request; returns the status seen before it."""
        with self._lock:
            now = self._clock()
            self._roll_window(now)
            status = self._snapshot(now)
            self._used += 1
            return status

    @property
    def status(self) -> RateLimitStatus:
        with self._lock:
            now = self._clock()
            self._roll_window(now)
            return self._snapshot(now)
