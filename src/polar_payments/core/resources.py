"""
Thin per-resource wrappers around :class:`RequestPipeline`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional
from urllib.parse import quote

from .models import (
    Customer,
    CustomerCreateRequest,
    Order,
    Product,
    ProductCreateRequest,
    ProductUpdateRequest,
)
from .pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page, iterate_pages
from .pipeline import CancellationToken, RequestDescriptor, RequestPipeline

__all__ = ["CustomersApi", "OrdersApi", "ProductsApi"]


class _ResourceApi:
    path = ""
    item_type: Any = None

    def __init__(self, pipeline: RequestPipeline) -> None:
        self._pipeline = pipeline

    def _item_path(self, resource_id: str) -> str:
        return f"{self.path}{quote(str(resource_id), safe='')}"

    def _call(
        self,
        method: str,
        path: str,
        *,
        response_type: Any = None,
        query: Optional[Dict[str, Any]] = None,
        body: Any = None,
        cancel: Optional[CancellationToken] = None,
    ) -> Any:
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            query=query or {},
            body=body,
            cancel=cancel,
        )
        return self._pipeline.execute(descriptor, response_type)

    def list(
        self,
        *,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        filters: Optional[Dict[str, Any]] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> Page:
        query: Dict[str, Any] = dict(filters or {})
        query["page"] = page
        query["limit"] = min(max(limit, 1), MAX_PAGE_SIZE)
        payload = self._call("GET", self.path, query=query, cancel=cancel)
        return Page.from_wire(payload, self.item_type, self._pipeline.serializer)

    def iterate(
        self,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        filters: Optional[Dict[str, Any]] = None,
        cancel: Optional[CancellationToken] = None,
    ) -> Iterator[Any]:
        """Lazily yield every item across all pages."""
        return iterate_pages(
            lambda page, size: self.list(page=page, limit=size, filters=filters, cancel=cancel),
            page_size=page_size,
            cancel=cancel,
        )

    def get(self, resource_id: str, *, cancel: Optional[CancellationToken] = None) -> Any:
        return self._call("GET", self._item_path(resource_id), response_type=self.item_type, cancel=cancel)


class ProductsApi(_ResourceApi):
    path = "v1/products/"
    item_type = Product

    def create(
        self,
        request: ProductCreateRequest,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> Product:
        return self._call("POST", self.path, response_type=Product, body=request, cancel=cancel)

    def update(
        self,
        product_id: str,
        request: ProductUpdateRequest,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> Product:
        return self._call(
            "PATCH", self._item_path(product_id), response_type=Product, body=request, cancel=cancel
        )

    def archive(self, product_id: str, *, cancel: Optional[CancellationToken] = None) -> Product:
        return self.update(product_id, ProductUpdateRequest(is_archived=True), cancel=cancel)


class OrdersApi(_ResourceApi):
    path = "v1/orders/"
    item_type = Order


class CustomersApi(_ResourceApi):
    path = "v1/customers/"
    item_type = Customer

    def create(
        self,
        request: CustomerCreateRequest,
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> Customer:
        return self._call("POST", self.path, response_type=Customer, body=request, cancel=cancel)

    def delete(self, customer_id: str, *, cancel: Optional[CancellationToken] = None) -> None:
        self._call("DELETE", self._item_path(customer_id), cancel=cancel)
