"""
Request and response models for the resources exposed by :class:`PolarClient`.

Response models ignore fields they do not know about, so new server-side
fields never break decoding. Request models reject unknown fields and check
their constraints on construction.
"""

from __future__ import annotations

from datetime import datetime
from enum import auto
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .enums import WireEnum
from .serialization import JsonValue
from .validation import RequestModel

__all__ = [
    "Customer",
    "CustomerCreateRequest",
    "Order",
    "OrderBillingReason",
    "OrderStatus",
    "Product",
    "ProductCreateRequest",
    "ProductPrice",
    "ProductPriceCreateRequest",
    "ProductPriceType",
    "ProductUpdateRequest",
    "RecurringInterval",
    "ResponseModel",
]


class ResponseModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ProductPriceType(WireEnum):
    FIXED = auto()
    CUSTOM = auto()
    FREE = auto()
    SEAT_BASED = auto()
    METERED_UNIT = auto()

    @classmethod
    def wire_names(cls) -> Mapping["ProductPriceType", str]:
        return {
            cls.FIXED: "fixed",
            cls.CUSTOM: "custom",
            cls.FREE: "free",
            cls.SEAT_BASED: "seat_based",
            cls.METERED_UNIT: "metered_unit",
        }


class RecurringInterval(WireEnum):
    DAY = auto()
    WEEK = auto()
    MONTH = auto()
    YEAR = auto()

    @classmethod
    def wire_names(cls) -> Mapping["RecurringInterval", str]:
        return {
            cls.DAY: "day",
            cls.WEEK: "week",
            cls.MONTH: "month",
            cls.YEAR: "year",
        }


class OrderStatus(WireEnum):
    PENDING = auto()
    PAID = auto()
    REFUNDED = auto()
    PARTIALLY_REFUNDED = auto()
    DISPUTED = auto()

    @classmethod
    def wire_names(cls) -> Mapping["OrderStatus", str]:
        return {
            cls.PENDING: "pending",
            cls.PAID: "paid",
            cls.REFUNDED: "refunded",
            cls.PARTIALLY_REFUNDED: "partially_refunded",
            cls.DISPUTED: "disputed",
        }


class OrderBillingReason(WireEnum):
    PURCHASE = auto()
    SUBSCRIPTION_CREATE = auto()
    SUBSCRIPTION_CYCLE = auto()
    SUBSCRIPTION_UPDATE = auto()

    @classmethod
    def wire_names(cls) -> Mapping["OrderBillingReason", str]:
        return {
            cls.PURCHASE: "purchase",
            cls.SUBSCRIPTION_CREATE: "subscription_create",
            cls.SUBSCRIPTION_CYCLE: "subscription_cycle",
            cls.SUBSCRIPTION_UPDATE: "subscription_update",
        }



class ProductPrice(ResponseModel):
    id: str
    amount_type: ProductPriceType
    price_currency: Optional[str] = None
    price_amount: Optional[int] = None
    recurring_interval: Optional[RecurringInterval] = None
    is_archived: bool = False
    product_id: Optional[str] = None


class Product(ResponseModel):
    id: str
    name: str
    description: Optional[str] = None
    is_recurring: bool = False
    is_archived: bool = False
    recurring_interval: Optional[RecurringInterval] = None
    organization_id: Optional[str] = None
    prices: List[ProductPrice] = Field(default_factory=list)
    metadata: Optional[JsonValue] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None


class ProductPriceCreateRequest(RequestModel):
    amount_type: ProductPriceType
    price_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    price_amount: Optional[int] = Field(None, ge=0)


class ProductCreateRequest(RequestModel):
    name: str = Field(min_length=3, max_length=256)
    prices: List[ProductPriceCreateRequest] = Field(default_factory=list)
    description: Optional[str] = Field(None, max_length=4096)
    recurring_interval: Optional[RecurringInterval] = None
    organization_id: Optional[str] = None
    metadata: Optional[JsonValue] = None


class ProductUpdateRequest(RequestModel):
    name: Optional[str] = Field(None, min_length=3, max_length=256)
    description: Optional[str] = Field(None, max_length=4096)
    is_archived: Optional[bool] = None
    metadata: Optional[JsonValue] = None


class Order(ResponseModel):
    id: str
    status: OrderStatus
    paid: bool = False
    subtotal_amount: int = 0
    discount_amount: int = 0
    net_amount: int = 0
    tax_amount: int = 0
    total_amount: int = 0
    refunded_amount: int = 0
    currency: str = "usd"
    billing_reason: Optional[OrderBillingReason] = None
    customer_id: Optional[str] = None
    product_id: Optional[str] = None
    subscription_id: Optional[str] = None
    metadata: Optional[JsonValue] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None


class Customer(ResponseModel):
    id: str
    email: str
    name: Optional[str] = None
    external_id: Optional[str] = None
    organization_id: Optional[str] = None
    metadata: Optional[JsonValue] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None


class CustomerCreateRequest(RequestModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=256)
    external_id: Optional[str] = None
    organization_id: Optional[str] = None
    metadata: Optional[JsonValue] = None
