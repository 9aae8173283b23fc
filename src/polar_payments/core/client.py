"""
HTTP client entry point for the Polar API.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import requests

from .budget import RateLimitStatus
from .config import ClientOptions
from .pipeline import CancellationToken, RequestDescriptor, RequestPipeline, Sleeper
from .resources import CustomersApi, OrdersApi, ProductsApi
from .results import Result

__all__ = ["PolarClient"]

logger = logging.getLogger(__name__)


class PolarClient:
    """
    Convenience wrapper exposing the resource APIs over one shared pipeline.

    The client closes the :class:`requests.Session` it creates; sessions passed
    in by the caller are left open.
    """

    def __init__(
        self,
        options: ClientOptions,
        *,
        session: Optional[requests.Session] = None,
        sleeper: Optional[Sleeper] = None,
    ) -> None:
        self.options = options
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.pipeline = RequestPipeline(options, session=self.session, sleeper=sleeper)

        self.products = ProductsApi(self.pipeline)
        self.orders = OrdersApi(self.pipeline)
        self.customers = CustomersApi(self.pipeline)
        logger.debug("Polar client configured for %s", options.resolved_base_url)

    @property
    def base_url(self) -> str:
        return self.options.resolved_base_url

    @property
    def rate_limit_status(self) -> RateLimitStatus:
        return self.pipeline.rate_limit_status

    def request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        response_type: Any = None,
        cancel: Optional[CancellationToken] = None,
    ) -> Any:
        """
        Send a request to an endpoint without a dedicated resource API.
        """
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            query=dict(query or {}),
            body=body,
            cancel=cancel,
        )
        return self.pipeline.execute(descriptor, response_type)

    def try_request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        response_type: Any = None,
        cancel: Optional[CancellationToken] = None,
    ) -> Result[Any]:
        """Same as :meth:`request`, returning a :class:`Result` instead of raising."""
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            query=dict(query or {}),
            body=body,
            cancel=cancel,
        )
        return self.pipeline.try_execute(descriptor, response_type)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "PolarClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
