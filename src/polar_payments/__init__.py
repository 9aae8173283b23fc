"""
Public facade for the Polar payments API client.

The module re-exports the most useful pieces for integrators so they can
``from polar_payments import ...`` without navigating the package.
"""

from .api import configure_logging, create_client
from .core import (
    ApiEnvironment,
    ApiError,
    CancellationToken,
    ClientOptions,
    ClientParameters,
    ConfigError,
    DecodeError,
    JsonValue,
    NetworkError,
    Page,
    PaginationInfo,
    PolarClient,
    PolarError,
    RateLimitStatus,
    RequestCancelledError,
    Result,
    ValidationError,
    WebhookEvent,
    WebhookVerificationOptions,
    WebhookVerifier,
    WireEnum,
    load_client_options,
    parse_event,
    verify_signature,
)
from .core.config import __version__
from .core.models import (
    Customer,
    CustomerCreateRequest,
    Order,
    OrderBillingReason,
    OrderStatus,
    Product,
    ProductCreateRequest,
    ProductPrice,
    ProductPriceCreateRequest,
    ProductPriceType,
    ProductUpdateRequest,
    RecurringInterval,
)

__all__ = (
    "ApiEnvironment",
    "ApiError",
    "CancellationToken",
    "ClientOptions",
    "ClientParameters",
    "ConfigError",
    "Customer",
    "CustomerCreateRequest",
    "DecodeError",
    "JsonValue",
    "NetworkError",
    "Order",
    "OrderBillingReason",
    "OrderStatus",
    "Page",
    "PaginationInfo",
    "PolarClient",
    "PolarError",
    "Product",
    "ProductCreateRequest",
    "ProductPrice",
    "ProductPriceCreateRequest",
    "ProductPriceType",
    "ProductUpdateRequest",
    "RateLimitStatus",
    "RecurringInterval",
    "RequestCancelledError",
    "Result",
    "ValidationError",
    "WebhookEvent",
    "WebhookVerificationOptions",
    "WebhookVerifier",
    "WireEnum",
    "__version__",
    "configure_logging",
    "create_client",
    "load_client_options",
    "parse_event",
    "verify_signature",
)
