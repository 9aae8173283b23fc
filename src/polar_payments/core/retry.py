"""
Pure helpers deciding whether and when a failed request is retried.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

__all__ = [
    "RETRYABLE_STATUS_CODES",
    "RetryAfter",
    "backoff_with_jitter",
    "extract_retry_delay",
    "parse_retry_after",
    "retry_reason",
    "should_retry",
]

_RETRY_REASONS = {
    408: "Request timeout",
    409: "Resource conflict",
    429: "Rate limit exceeded",
    500: "Internal server error",
    502: "Bad gateway",
    503: "Service unavailable",
    504: "Gateway timeout",
}

RETRYABLE_STATUS_CODES = frozenset(_RETRY_REASONS)


def should_retry(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES


def retry_reason(status_code: int) -> str:
    return _RETRY_REASONS.get(status_code, f"HTTP {status_code} error")


def backoff_with_jitter(
    attempt: int,
    initial_delay_ms: float,
    max_delay_ms: float,
    jitter_factor: float,
    *,
    rng: Optional[random.Random] = None,
) -> timedelta:
    """
    Exponential backoff for the 1-based ``attempt``, capped at ``max_delay_ms``,
    plus up to ``jitter_factor`` of the capped delay as random jitter.
    """
    if attempt < 1:
        raise ValueError("attempt numbering starts at 1")
    jitter_factor = min(max(jitter_factor, 0.0), 1.0)

    base_ms = min(initial_delay_ms * (2 ** (attempt - 1)), max_delay_ms)
    jitter_ms = (rng or random).uniform(0.0, base_ms * jitter_factor)
    return timedelta(milliseconds=base_ms + jitter_ms)


@dataclass(frozen=True)
class RetryAfter:
    """
    A server hint for when to retry: either a relative ``delay`` or an
    absolute ``date``.
    """

    delay: Optional[timedelta] = None
    date: Optional[datetime] = None


def parse_retry_after(header: Optional[str]) -> Optional[RetryAfter]:
    """Parse a ``Retry-After`` header in delta-seconds or HTTP-date form."""
    if header is None:
        return None
    value = header.strip()
    if not value:
        return None
    if value.isdigit():
        return RetryAfter(delay=timedelta(seconds=int(value)))
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return RetryAfter(date=when)


def extract_retry_delay(
    signal: Optional[RetryAfter],
    max_delay_ms: float,
    *,
    now: Optional[datetime] = None,
) -> Optional[timedelta]:
    """
    Turn a retry-after signal into a delay no longer than ``max_delay_ms``.

    Returns ``None`` when there is no signal or its absolute date has already
    passed.
    """
    if signal is None:
        return None
    cap = timedelta(milliseconds=max_delay_ms)
    if signal.delay is not None:
        return min(signal.delay, cap)
    if signal.date is not None:
        current = now or datetime.now(timezone.utc)
        remaining = signal.date - current
        if remaining <= timedelta(0):
            return None
        return min(remaining, cap)
    return None
