"""
Non-raising call results.

:meth:`RequestPipeline.try_execute` and :meth:`PolarClient.try_request` wrap
the outcome of a call in a :class:`Result` instead of raising, for callers
that prefer branching over ``try``/``except``::

    result = client.try_request("GET", "v1/orders/ord_1", response_type=Order)
    if result.is_not_found_error:
        ...
    order = result.unwrap()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import ApiError, PolarError, ValidationError

__all__ = ["Result"]

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[PolarError] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: PolarError) -> "Result[T]":
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def unwrap(self) -> Optional[T]:
        """Return the value, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value

    def value_or_none_if_not_found(self) -> Optional[T]:
        """Like :meth:`unwrap`, but a 404 yields ``None``."""
        if self.is_not_found_error:
            return None
        return self.unwrap()

    def _api_error(self) -> Optional[ApiError]:
        return self.error if isinstance(self.error, ApiError) else None

    @property
    def is_rate_limit_error(self) -> bool:
        error = self._api_error()
        return error is not None and error.is_rate_limit_error

    @property
    def is_auth_error(self) -> bool:
        error = self._api_error()
        return error is not None and error.is_auth_error

    @property
    def is_not_found_error(self) -> bool:
        error = self._api_error()
        return error is not None and error.is_not_found_error

    @property
    def is_server_error(self) -> bool:
        error = self._api_error()
        return error is not None and error.is_server_error

    @property
    def is_client_error(self) -> bool:
        error = self._api_error()
        return error is not None and error.is_client_error

    @property
    def is_validation_error(self) -> bool:
        if isinstance(self.error, ValidationError):
            return True
        error = self._api_error()
        return error is not None and error.is_validation_error

    def __str__(self) -> str:
        return "Success" if self.error is None else f"Failure: {self.error}"
