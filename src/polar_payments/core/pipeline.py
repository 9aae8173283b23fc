"""
The request pipeline shared by every resource API.

One call moves through these states::

    start -> dispatch -> (success | retry -> wait -> dispatch | failed)

Each dispatch produces an :class:`AttemptOutcome`; exceptions are only raised
once the call reaches its terminal state.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from .budget import RateLimitStatus, RequestBudget
from .classifier import classify_error, classify_network_error
from .config import ClientOptions
from .errors import PolarError, RequestCancelledError
from .retry import (
    RetryAfter,
    backoff_with_jitter,
    extract_retry_delay,
    parse_retry_after,
    retry_reason,
    should_retry,
)
from .results import Result
from .serialization import JsonSerializer
from .validation import validate

__all__ = [
    "AttemptOutcome",
    "CancellationToken",
    "RequestDescriptor",
    "RequestPipeline",
    "Verdict",
]

logger = logging.getLogger(__name__)

# Worth another attempt; any other RequestException fails at once.
_TRANSIENT_NETWORK_ERRORS = (
    requests.ConnectionError,
    requests.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


class CancellationToken:
    """A cancel flag that can also be waited on."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; returns ``True`` if cancelled meanwhile."""
        return self._event.wait(max(seconds, 0.0))

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelledError("Request was cancelled")


Sleeper = Callable[[float, Optional[CancellationToken]], None]


def _default_sleeper(seconds: float, cancel: Optional[CancellationToken]) -> None:
    token = cancel or CancellationToken()
    if token.wait(seconds):
        raise RequestCancelledError("Request was cancelled while waiting to retry")


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    path: str
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Any = None
    cancel: Optional[CancellationToken] = None


class Verdict(enum.Enum):
    SUCCESS = "success"
    RETRY = "retry"
    FAIL = "fail"


@dataclass
class AttemptOutcome:
    verdict: Verdict
    value: Any = None
    error: Optional[PolarError] = None
    retry_after: Optional[RetryAfter] = None
    reason: str = ""


def _query_value(value: Any, serializer: JsonSerializer) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_query_value(item, serializer) for item in value]
    wire = serializer.to_wire(value)
    return wire if isinstance(wire, str) else str(wire)


class RequestPipeline:
    """
    Sends requests with auth, budget accounting and bounded retries.

    A pipeline is safe to share between threads; each call keeps its retry
    state on its own stack.
    """

    def __init__(
        self,
        options: ClientOptions,
        *,
        session: Optional[requests.Session] = None,
        serializer: Optional[JsonSerializer] = None,
        budget: Optional[RequestBudget] = None,
        sleeper: Optional[Sleeper] = None,
    ) -> None:
        self.options = options
        self.session = session or requests.Session()
        self.serializer = serializer or JsonSerializer(options.serializer_options)
        self.budget = budget or RequestBudget(options.requests_per_minute)
        self._sleep = sleeper or _default_sleeper

    @property
    def rate_limit_status(self) -> RateLimitStatus:
        return self.budget.status

    def url_for(self, path: str) -> str:
        return f"{self.options.resolved_base_url}/{path.lstrip('/')}"

    def build_headers(self, *, has_body: bool) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.options.access_token}",
            "Accept": "application/json",
            "User-Agent": self.options.user_agent,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        headers.update(self.options.default_headers)
        return headers

    def execute(self, descriptor: RequestDescriptor, response_type: Any = None) -> Any:
        """
        Run ``descriptor`` to completion and return the decoded response.

        Raises :class:`ApiError`, :class:`NetworkError`, :class:`DecodeError`,
        :class:`ValidationError` or :class:`RequestCancelledError`.
        """
        if descriptor.body is not None:
            validate(descriptor.body)

        method = descriptor.method.upper()
        url = self.url_for(descriptor.path)
        headers = self.build_headers(has_body=descriptor.body is not None)
        data = (
            self.serializer.dumps(descriptor.body).encode("utf-8")
            if descriptor.body is not None
            else None
        )
        params = {
            key: _query_value(value, self.serializer)
            for key, value in descriptor.query.items()
            if value is not None
        }

        max_attempts = 1 + self.options.max_retry_attempts
        attempt = 0
        while True:
            attempt += 1
            if descriptor.cancel is not None:
                descriptor.cancel.raise_if_cancelled()

            outcome = self._attempt(method, url, headers, params, data, response_type, attempt)
            if outcome.verdict is Verdict.SUCCESS:
                return outcome.value
            if outcome.verdict is Verdict.FAIL or attempt >= max_attempts:
                if outcome.error is None:
                    raise PolarError(f"{method} {url} failed: {outcome.reason or 'unknown error'}")
                raise outcome.error

            delay = self._retry_delay(attempt, outcome.retry_after)
            logger.warning(
                "%s %s failed (%s); retrying in %.2fs (attempt %d of %d)",
                method,
                url,
                outcome.reason,
                delay.total_seconds(),
                attempt + 1,
                max_attempts,
            )
            self._sleep(delay.total_seconds(), descriptor.cancel)

    def try_execute(self, descriptor: RequestDescriptor, response_type: Any = None) -> Result[Any]:
        """
        Like :meth:`execute`, but failures come back as a :class:`Result`.

        :class:`RequestCancelledError` is still raised.
        """
        try:
            return Result.success(self.execute(descriptor, response_type))
        except RequestCancelledError:
            raise
        except PolarError as exc:
            return Result.failure(exc)

    def _retry_delay(self, attempt: int, retry_after: Optional[RetryAfter]) -> timedelta:
        if self.options.respect_retry_after:
            hinted = extract_retry_delay(retry_after, self.options.max_retry_delay_ms)
            if hinted is not None:
                return hinted
        return backoff_with_jitter(
            attempt,
            self.options.initial_retry_delay_ms,
            self.options.max_retry_delay_ms,
            self.options.jitter_factor,
        )

    def _attempt(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        params: Mapping[str, Any],
        data: Optional[bytes],
        response_type: Any,
        attempt: int,
    ) -> AttemptOutcome:
        status = self.budget.record()
        if status.exhausted:
            logger.warning(
                "Client-side budget of %d requests/minute exhausted; sending anyway",
                status.limit,
            )

        logger.debug("%s %s (attempt %d)", method, url, attempt)
        try:
            response = self.session.request(
                method,
                url,
                params=params or None,
                data=data,
                headers=dict(headers),
                timeout=self.options.timeout_seconds,
            )
        except requests.RequestException as exc:
            transient = isinstance(exc, _TRANSIENT_NETWORK_ERRORS)
            return AttemptOutcome(
                verdict=Verdict.RETRY if transient else Verdict.FAIL,
                error=classify_network_error(exc, attempts=attempt),
                reason=f"network error: {exc}",
            )

        if 200 <= response.status_code < 300:
            return self._decode(response, response_type)

        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        error = classify_error(response.status_code, response.text, retry_after)
        verdict = Verdict.RETRY if should_retry(response.status_code) else Verdict.FAIL
        return AttemptOutcome(
            verdict=verdict,
            error=error,
            retry_after=retry_after,
            reason=retry_reason(response.status_code),
        )

    def _decode(self, response: requests.Response, response_type: Any) -> AttemptOutcome:
        if response.status_code == 204 or not response.content or not response.content.strip():
            return AttemptOutcome(verdict=Verdict.SUCCESS, value=None)
        try:
            value = self.serializer.loads(response.content, response_type)
        except PolarError as exc:
            return AttemptOutcome(verdict=Verdict.FAIL, error=exc, reason="decode error")
        return AttemptOutcome(verdict=Verdict.SUCCESS, value=value)
