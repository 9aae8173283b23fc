"""Shared fixtures: a scripted HTTP session and a recording sleeper."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from polar_payments.core.config import ClientOptions


def make_response(
    status_code: int,
    body: Any = None,
    *,
    headers: Optional[Dict[str, str]] = None,
) -> requests.Response:
    """Build a real :class:`requests.Response` without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.encoding = "utf-8"
    response.headers = CaseInsensitiveDict(headers or {})
    return response


class FakeSession:
    """Plays back scripted responses (or raises scripted exceptions) in order."""

    def __init__(self, *script: Any) -> None:
        self.script: List[Any] = list(script)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.script:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class RecordingSleeper:
    """Stands in for the real wait between retries."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    def __call__(self, seconds: float, cancel: Any = None) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleeper:
    return RecordingSleeper()


@pytest.fixture
def options() -> ClientOptions:
    return ClientOptions(
        access_token="polar_oat_test",
        environment="sandbox",
        max_retry_attempts=3,
        initial_retry_delay_ms=1000,
        max_retry_delay_ms=30000,
        jitter_factor=0.1,
    )
