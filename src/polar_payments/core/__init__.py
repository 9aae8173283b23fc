"""
Core primitives of the Polar API client.
"""

from .budget import RateLimitStatus, RequestBudget
from .classifier import classify_error, classify_network_error
from .client import PolarClient
from .config import (
    ClientOptions,
    ClientParameters,
    ConfigError,
    load_client_options,
)
from .enums import EnumCodec, EnumMapping, WireEnum
from .environment import (
    ApiEnvironment,
    EnvironmentSnapshot,
    build_environment,
)
from .errors import (
    ApiError,
    DecodeError,
    EnumMappingError,
    NetworkError,
    PolarError,
    RequestCancelledError,
    ValidationError,
)
from .pagination import Page, PaginationInfo, iterate_pages
from .pipeline import CancellationToken, RequestDescriptor, RequestPipeline
from .retry import (
    RetryAfter,
    backoff_with_jitter,
    extract_retry_delay,
    parse_retry_after,
    retry_reason,
    should_retry,
)
from .results import Result
from .serialization import JsonSerializer, JsonValue, SerializerOptions
from .validation import RequestModel, validate
from .webhooks import (
    WebhookEvent,
    WebhookVerificationOptions,
    WebhookVerifier,
    parse_event,
    verify_signature,
)

__all__ = [
    "ApiEnvironment",
    "ApiError",
    "CancellationToken",
    "ClientOptions",
    "ClientParameters",
    "ConfigError",
    "DecodeError",
    "EnumCodec",
    "EnumMapping",
    "EnumMappingError",
    "EnvironmentSnapshot",
    "JsonSerializer",
    "JsonValue",
    "NetworkError",
    "Page",
    "PaginationInfo",
    "PolarClient",
    "PolarError",
    "RateLimitStatus",
    "RequestBudget",
    "RequestCancelledError",
    "RequestDescriptor",
    "RequestModel",
    "RequestPipeline",
    "Result",
    "RetryAfter",
    "SerializerOptions",
    "ValidationError",
    "WebhookEvent",
    "WebhookVerificationOptions",
    "WebhookVerifier",
    "WireEnum",
    "backoff_with_jitter",
    "build_environment",
    "classify_error",
    "classify_network_error",
    "extract_retry_delay",
    "iterate_pages",
    "load_client_options",
    "parse_event",
    "parse_retry_after",
    "retry_reason",
    "should_retry",
    "validate",
    "verify_signature",
]
