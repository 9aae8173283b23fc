"""
Public, high-level helpers for building a Polar client.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import requests

from .core.client import PolarClient
from .core.config import (
    ClientOptions,
    ClientParameters,
    load_client_options,
)
from .core.environment import ApiEnvironment
from .core.pipeline import Sleeper

__all__ = [
    "configure_logging",
    "create_client",
]


def configure_logging(level: str = "INFO") -> None:
    """Basic logging setup for scripts; libraries should leave this alone."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_client(
    *,
    options: Optional[ClientOptions] = None,
    session: Optional[requests.Session] = None,
    sleeper: Optional[Sleeper] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    access_token: Optional[str] = None,
    base_url: Optional[str] = None,
    environment: Optional[ApiEnvironment | str] = None,
    timeout_seconds: Optional[int | str] = None,
    max_retry_attempts: Optional[int | str] = None,
    initial_retry_delay_ms: Optional[int | str] = None,
    max_retry_delay_ms: Optional[int | str] = None,
    jitter_factor: Optional[float | str] = None,
    requests_per_minute: Optional[int | str] = None,
    respect_retry_after: Optional[bool | str] = None,
    user_agent: Optional[str] = None,
) -> PolarClient:
    """
    Construct a :class:`PolarClient`.

    Callers can either supply ready-made :class:`ClientOptions` or let the
    helper assemble them from environment data and keyword arguments.
    """
    if options is not None:
        extras = (
            overrides,
            base,
            parameters,
            access_token,
            base_url,
            environment,
            timeout_seconds,
            max_retry_attempts,
            initial_retry_delay_ms,
            max_retry_delay_ms,
            jitter_factor,
            requests_per_minute,
            respect_retry_after,
            user_agent,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either pre-built ClientOptions or individual parameters, not both."
            )
        resolved = options
    else:
        resolved = load_client_options(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            access_token=access_token,
            base_url=base_url,
            environment=environment,
            timeout_seconds=timeout_seconds,
            max_retry_attempts=max_retry_attempts,
            initial_retry_delay_ms=initial_retry_delay_ms,
            max_retry_delay_ms=max_retry_delay_ms,
            jitter_factor=jitter_factor,
            requests_per_minute=requests_per_minute,
            respect_retry_after=respect_retry_after,
            user_agent=user_agent,
        )
    return PolarClient(resolved, session=session, sleeper=sleeper)
