"""
Verification and parsing of inbound Polar webhooks.

The signature header looks like ``t=<unix seconds>,v1=<hex hmac>``. The HMAC
is SHA-256 over ``"{t}.{raw body}"`` keyed with the endpoint secret, so the
body must be verified exactly as received, before any JSON parsing.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import DecodeError
from .serialization import JsonSerializer, JsonValue

__all__ = [
    "DEFAULT_TOLERANCE_SECONDS",
    "SIGNATURE_HEADER",
    "WebhookEvent",
    "WebhookVerificationOptions",
    "WebhookVerifier",
    "compute_signature",
    "get_event_id",
    "get_event_type",
    "parse_event",
    "verify_signature",
]

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Polar-Signature"
DEFAULT_TOLERANCE_SECONDS = 300

Payload = Union[bytes, str]


def _as_bytes(payload: Payload) -> bytes:
    return payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)


def _parse_header(header: str) -> Optional[Tuple[str, str]]:
    timestamp = None
    digest = None
    for part in header.split(","):
        part = part.strip()
        if part.startswith("t=") and timestamp is None:
            timestamp = part[2:]
        elif part.startswith("v1=") and digest is None:
            digest = part[3:]
    if not timestamp or not digest:
        return None
    return timestamp, digest


def _constant_time_equals(a: str, b: str) -> bool:
    if len(a) != len(b):
        return False
    result = 0
    for left, right in zip(a, b):
        result |= ord(left) ^ ord(right)
    return result == 0


def compute_signature(payload: Payload, secret: str, timestamp: int) -> str:
    """Return the lowercase hex HMAC for ``payload`` signed at ``timestamp``."""
    message = f"{timestamp}.".encode("utf-8") + _as_bytes(payload)
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(
    payload: Payload,
    signature_header: str,
    secret: str,
    *,
    tolerance_seconds: Optional[int] = DEFAULT_TOLERANCE_SECONDS,
    now: Optional[float] = None,
) -> bool:
    """
    Check a webhook signature header against the raw request body.

    Returns ``False`` for any malformed input, stale timestamp or mismatch;
    never raises. ``tolerance_seconds=None`` skips the timestamp window.
    """
    try:
        if not payload or not signature_header or not secret:
            return False

        parsed = _parse_header(signature_header)
        if parsed is None:
            logger.debug("Webhook signature header is missing t= or v1=")
            return False
        timestamp, provided = parsed

        signed_at = int(timestamp)
        if tolerance_seconds is not None:
            current = time.time() if now is None else now
            if abs(current - signed_at) > tolerance_seconds:
                logger.debug("Webhook timestamp %s is outside the %ss window", timestamp, tolerance_seconds)
                return False

        message = timestamp.encode("utf-8") + b"." + _as_bytes(payload)
        expected = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()
        return _constant_time_equals(expected, provided.lower())
    except Exception:  # noqa: BLE001
        logger.debug("Webhook signature verification failed", exc_info=True)
        return False


@dataclass(frozen=True)
class WebhookVerificationOptions:
    secret: str
    max_time_difference_seconds: int = DEFAULT_TOLERANCE_SECONDS
    skip_timestamp_verification: bool = False


class WebhookVerifier:
    """Verifier bound to one endpoint secret."""

    def __init__(self, options: WebhookVerificationOptions) -> None:
        self.options = options

    def verify(self, payload: Payload, signature_header: str, *, now: Optional[float] = None) -> bool:
        tolerance = (
            None
            if self.options.skip_timestamp_verification
            else self.options.max_time_difference_seconds
        )
        return verify_signature(
            payload,
            signature_header,
            self.options.secret,
            tolerance_seconds=tolerance,
            now=now,
        )


class WebhookEvent(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    data: JsonValue = Field(default_factory=JsonValue)
    id: Optional[str] = None
    created_at: Optional[datetime] = None


def parse_event(payload: Payload, serializer: Optional[JsonSerializer] = None) -> WebhookEvent:
    """Parse a verified webhook body into a :class:`WebhookEvent`."""
    if not payload:
        raise DecodeError("Webhook payload must not be empty", target="WebhookEvent")
    return (serializer or JsonSerializer()).loads(_as_bytes(payload), WebhookEvent)


def _top_level_string(payload: Payload, key: str) -> Optional[str]:
    if not payload:
        return None
    try:
        document = json.loads(_as_bytes(payload))
    except (ValueError, RecursionError):
        return None
    if isinstance(document, dict) and isinstance(document.get(key), str):
        return document[key]
    return None


def get_event_type(payload: Payload) -> Optional[str]:
    return _top_level_string(payload, "type")


def get_event_id(payload: Payload) -> Optional[str]:
    return _top_level_string(payload, "id")
