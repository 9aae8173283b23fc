"""
Exception types raised by the Polar client.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, List, Optional, Sequence

__all__ = [
    "ApiError",
    "DecodeError",
    "EnumMappingError",
    "NetworkError",
    "PolarError",
    "RequestCancelledError",
    "ValidationError",
]


class PolarError(Exception):
    """Base class for every error raised by this package."""


class ApiError(PolarError):
    """
    A non-success HTTP response, classified into a structured error.

    Instances are produced by :func:`polar_payments.core.classifier.classify_error`
    and only raised once the request pipeline has given up retrying.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        error_type: Optional[str] = None,
        response_body: Optional[str] = None,
        details: Any = None,
        retry_after: Optional[timedelta] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error_type = error_type
        self.response_body = response_body
        self.details = details
        self.retry_after = retry_after

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"ApiError(status_code={self.status_code!r}, message={self.message!r}, "
            f"error_type={self.error_type!r})"
        )

    @property
    def is_rate_limit_error(self) -> bool:
        return self.status_code == 429

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def is_not_found_error(self) -> bool:
        return self.status_code == 404

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_validation_error(self) -> bool:
        return self.status_code in (400, 422)

    @property
    def is_conflict_error(self) -> bool:
        return self.status_code == 409

    @property
    def is_method_not_allowed_error(self) -> bool:
        return self.status_code == 405


class NetworkError(PolarError):
    """No HTTP response could be obtained (DNS, connect, timeout)."""

    def __init__(self, message: str, *, attempts: int = 1) -> None:
        super().__init__(message)
        self.attempts = attempts


class DecodeError(PolarError):
    """A success response could not be turned into the expected type."""

    def __init__(
        self,
        message: str,
        *,
        token: Any = None,
        target: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.token = token
        self.target = target


class ValidationError(PolarError, ValueError):
    """A request object failed its declared field constraints."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors) or "Validation failed")


class RequestCancelledError(PolarError):
    """The caller cancelled the request before it completed."""


class EnumMappingError(PolarError):
    """An enum declares the same wire token for two members."""
