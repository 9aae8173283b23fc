"""Tests for the client facade and resource APIs."""

from __future__ import annotations

import json

import pytest

import polar_payments
from polar_payments import (
    ClientOptions,
    CustomerCreateRequest,
    Order,
    OrderStatus,
    PolarClient,
    ProductCreateRequest,
    ProductUpdateRequest,
    ValidationError,
    create_client,
)

from conftest import FakeSession, make_response


def _page(items, page=1, max_page=1):
    return {
        "items": items,
        "pagination": {"page": page, "total_count": len(items), "max_page": max_page},
    }


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(options, session, sleeper) -> PolarClient:
    return PolarClient(options, session=session, sleeper=sleeper)


# ── resources ────────────────────────────────────────────────


def test_get_order(client: PolarClient, session: FakeSession) -> None:
    session.script.append(make_response(200, {"id": "ord_1", "status": "refunded"}))
    order = client.orders.get("ord_1")
    assert order.status is OrderStatus.REFUNDED
    assert session.calls[0]["url"] == "https://sandbox-api.polar.sh/v1/orders/ord_1"


def test_list_products_clamps_limit(client: PolarClient, session: FakeSession) -> None:
    session.script.append(make_response(200, _page([{"id": "prod_1", "name": "Pro"}])))
    page = client.products.list(limit=500, filters={"is_archived": False})
    assert [product.id for product in page.items] == ["prod_1"]
    assert session.calls[0]["params"] == {"is_archived": "false", "page": "1", "limit": "100"}


def test_iterate_customers_across_pages(client: PolarClient, session: FakeSession) -> None:
    session.script.extend(
        [
            make_response(200, _page([{"id": "c1", "email": "a@x.io"}], page=1, max_page=2)),
            make_response(200, _page([{"id": "c2", "email": "b@x.io"}], page=2, max_page=2)),
        ]
    )
    customers = list(client.customers.iterate(page_size=1))
    assert [customer.id for customer in customers] == ["c1", "c2"]
    assert [call["params"]["page"] for call in session.calls] == ["1", "2"]


def test_create_product_posts_json(client: PolarClient, session: FakeSession) -> None:
    session.script.append(make_response(201, {"id": "prod_1", "name": "Pro plan"}))
    product = client.products.create(ProductCreateRequest(name="Pro plan", description="Monthly"))
    assert product.id == "prod_1"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert json.loads(call["data"]) == {"name": "Pro plan", "prices": [], "description": "Monthly"}


def test_archive_product_patches(client: PolarClient, session: FakeSession) -> None:
    session.script.append(make_response(200, {"id": "prod_1", "name": "Pro", "is_archived": True}))
    product = client.products.archive("prod_1")
    assert product.is_archived is True
    call = session.calls[0]
    assert call["method"] == "PATCH"
    assert call["url"].endswith("/v1/products/prod_1")
    assert json.loads(call["data"]) == {"is_archived": True}


def test_update_validates_name(client: PolarClient, session: FakeSession) -> None:
    with pytest.raises(ValidationError):
        client.products.update("prod_1", ProductUpdateRequest(name="x"))
    assert session.calls == []


def test_create_customer_rejects_bad_email(client: PolarClient, session: FakeSession) -> None:
    with pytest.raises(ValidationError, match="email: value is not a valid email address"):
        client.customers.create(CustomerCreateRequest(email="not-an-email"))
    assert session.calls == []


def test_delete_customer(client: PolarClient, session: FakeSession) -> None:
    session.script.append(make_response(204))
    assert client.customers.delete("cus_1") is None
    assert session.calls[0]["method"] == "DELETE"


def test_resource_ids_are_escaped(client: PolarClient, session: FakeSession) -> None:
    session.script.extend(
        [
            make_response(200, {"id": "a/b", "status": "paid"}),
            make_response(200, {"id": "p", "name": "Pro", "is_archived": True}),
            make_response(204),
        ]
    )
    client.orders.get("a/b")
    client.products.archive("../admin?x=1")
    client.customers.delete("c#1")
    urls = [call["url"] for call in session.calls]
    assert urls == [
        "https://sandbox-api.polar.sh/v1/orders/a%2Fb",
        "https://sandbox-api.polar.sh/v1/products/..%2Fadmin%3Fx%3D1",
        "https://sandbox-api.polar.sh/v1/customers/c%231",
    ]


def test_raw_request_escape_hatch(client: PolarClient, session: FakeSession) -> None:
    session.script.append(make_response(200, {"ok": True}))
    assert client.request("GET", "v1/checkouts/", query={"limit": 5}) == {"ok": True}
    assert session.calls[0]["params"] == {"limit": "5"}


def test_try_request_returns_results(client: PolarClient, session: FakeSession) -> None:
    session.script.extend(
        [
            make_response(200, {"id": "ord_1", "status": "paid"}),
            make_response(404, {"detail": "Order not found"}),
        ]
    )
    found = client.try_request("GET", "v1/orders/ord_1", response_type=Order)
    assert found.is_success
    assert found.unwrap().status is OrderStatus.PAID

    missing = client.try_request("GET", "v1/orders/nope", response_type=Order)
    assert missing.is_failure
    assert missing.is_not_found_error
    assert missing.value_or_none_if_not_found() is None
    assert str(missing) == "Failure: HTTP 404: Order not found"


def test_rate_limit_status_tracks_requests(client: PolarClient, session: FakeSession) -> None:
    before = client.rate_limit_status.available
    session.script.append(make_response(200, {"id": "ord_1", "status": "paid"}))
    client.orders.get("ord_1")
    assert client.rate_limit_status.available == before - 1


# ── lifecycle ────────────────────────────────────────────────


def test_injected_session_is_left_open(options, session, sleeper) -> None:
    with PolarClient(options, session=session, sleeper=sleeper):
        pass
    assert session.closed is False


def test_owned_session_is_closed(options) -> None:
    client = PolarClient(options)
    closed = []
    client.session.close = lambda: closed.append(True)
    with client:
        pass
    assert closed == [True]


# ── create_client ────────────────────────────────────────────


def test_create_client_from_keywords(session) -> None:
    client = create_client(
        session=session,
        env_file=None,
        base={},
        access_token="tok",
        environment="sandbox",
    )
    assert client.base_url == "https://sandbox-api.polar.sh"
    assert client.options.access_token == "tok"


def test_create_client_with_options(options, session) -> None:
    client = create_client(options=options, session=session)
    assert client.options is options


def test_create_client_rejects_mixed_inputs(options) -> None:
    with pytest.raises(ValueError, match="not both"):
        create_client(options=options, access_token="other")


def test_package_exports_version() -> None:
    assert polar_payments.__version__ == "0.1.0"
    assert "create_client" in polar_payments.__all__
