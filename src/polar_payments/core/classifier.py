"""
Turn failed HTTP responses into :class:`ApiError` instances.

Classification never raises: bodies that are not JSON objects fall back to a
fixed message per status code.
"""

from __future__ import annotations

import json
from datetime import datetime
from http import HTTPStatus
from typing import Any, Mapping, Optional

from .errors import ApiError, NetworkError
from .retry import RetryAfter, extract_retry_delay

__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "classify_error",
    "classify_network_error",
    "default_error_message",
]

_MESSAGE_FIELDS = ("message", "error", "detail", "description")
_TYPE_FIELDS = ("type", "code", "error_code", "error_type")
_DETAIL_FIELDS = ("details", "data", "context", "validation_errors")

DEFAULT_ERROR_MESSAGE = "An error occurred while processing the request."

_STATUS_MESSAGES = {
    400: "The request was invalid or malformed.",
    401: "Authentication failed or was not provided.",
    403: "Access to the requested resource is forbidden.",
    404: "The requested resource was not found.",
    405: "The HTTP method is not allowed for this endpoint.",
    409: "The request conflicts with the current state of the resource.",
    429: "Rate limit exceeded. Please try again later.",
    500: "An internal server error occurred.",
    502: "The server received an invalid response.",
    503: "The service is temporarily unavailable.",
    504: "The gateway timed out.",
}

# Upper bound when echoing a retry-after hint back in error messages.
_MESSAGE_DELAY_CAP_MS = 24 * 60 * 60 * 1000


def default_error_message(status_code: int, body: Optional[str]) -> str:
    message = _STATUS_MESSAGES.get(status_code)
    if message is not None:
        return message
    return f"HTTP {status_code}: {body or ''}"


def _status_name(status_code: int) -> str:
    """``503`` -> ``"ServiceUnavailable"``; unknown codes stay numeric."""
    try:
        name = HTTPStatus(status_code).name
    except ValueError:
        return str(status_code)
    return "".join(part.capitalize() for part in name.split("_"))


def _message_from(payload: Mapping[str, Any]) -> str:
    for name in _MESSAGE_FIELDS:
        if name in payload:
            value = payload[name]
            if isinstance(value, str):
                return value
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return str(value)
            try:
                return json.dumps(value)
            except (TypeError, ValueError, RecursionError):
                return DEFAULT_ERROR_MESSAGE

    errors = payload.get("errors")
    if isinstance(errors, list):
        messages = [
            entry["message"]
            for entry in errors
            if isinstance(entry, dict) and isinstance(entry.get("message"), str)
        ]
        if messages:
            return "; ".join(messages)

    return DEFAULT_ERROR_MESSAGE


def _type_from(payload: Mapping[str, Any]) -> Optional[str]:
    for name in _TYPE_FIELDS:
        value = payload.get(name)
        if isinstance(value, str):
            return value
    return None


def _details_from(payload: Mapping[str, Any]) -> Any:
    for name in _DETAIL_FIELDS:
        if name in payload:
            return payload[name]
    return None


def _with_rate_limit_context(
    message: str,
    retry_after: Optional[RetryAfter],
    now: Optional[datetime],
) -> str:
    delay = extract_retry_delay(retry_after, _MESSAGE_DELAY_CAP_MS, now=now)
    if delay is not None:
        return f"{message} Retry after {delay.total_seconds():.0f} seconds."
    return f"{message} Consider implementing exponential backoff and reducing request frequency."


def classify_error(
    status_code: int,
    body: Optional[str],
    retry_after: Optional[RetryAfter] = None,
    *,
    now: Optional[datetime] = None,
) -> ApiError:
    """
    Build an :class:`ApiError` from a failed response.

    ``message`` comes from the first present field among ``message``,
    ``error``, ``detail`` and ``description``; failing that, the ``message``
    entries of an ``errors`` array are joined with ``"; "``.
    """
    delay = extract_retry_delay(retry_after, _MESSAGE_DELAY_CAP_MS, now=now)

    payload: Any = None
    if body:
        try:
            payload = json.loads(body)
        except (ValueError, RecursionError):
            payload = None

    if isinstance(payload, dict):
        message = _message_from(payload)
        if status_code == 429:
            message = _with_rate_limit_context(message, retry_after, now)
        return ApiError(
            status_code,
            message,
            error_type=_type_from(payload),
            response_body=body,
            details=_details_from(payload),
            retry_after=delay,
        )

    message = default_error_message(status_code, body)
    if status_code == 429:
        message = _with_rate_limit_context(message, retry_after, now)
    return ApiError(
        status_code,
        message,
        error_type=_status_name(status_code),
        response_body=body,
        retry_after=delay,
    )


def classify_network_error(exc: BaseException, *, attempts: int = 1) -> NetworkError:
    error = NetworkError(
        f"Request failed without a response after {attempts} attempt(s): {exc}",
        attempts=attempts,
    )
    error.__cause__ = exc
    return error
