"""Tests for the HTTP Order Store against a mocked spreadsheet web app."""

import json

import httpx
import pytest

from storefront.domain.exceptions import (
    NotFoundError,
    StoreError,
    UnauthorizedError,
    UnavailableError,
)
from storefront.domain.model.order import ShippingStatus
from storefront.domain.repository.order_store import OrderFilter, StatusUpdate
from storefront.infrastructure.store import records
from storefront.infrastructure.store.http_order_store import HttpOrderStore
from tests.fakes import ADMIN_TOKEN, make_order

URL = "https://script.test/macros/exec"


def _store(handler) -> HttpOrderStore:
    return HttpOrderStore(URL, transport=httpx.MockTransport(handler))


def _ok(data=None, **extra) -> httpx.Response:
    return httpx.Response(200, json={"success": True, "data": data, **extra})


class TestReads:

    def test_list_products(self):
        seen = []

        def handler(request):
            seen.append(request.url.params["action"])
            return _ok([{"ProductID": "PROD-001", "Name": "Tote Bag", "Price": 450, "Stock": 3}])

        products = _store(handler).list_products()

        assert seen == ["getProducts"]
        assert products[0].name == "Tote Bag"
        assert products[0].stock == 3

    def test_follows_redirect_to_content_host(self):
        def handler(request):
            if request.url.host == "script.test":
                return httpx.Response(302, headers={"location": "https://content.test/echo?x=1"})
            return _ok([])

        assert _store(handler).list_products() == []

    def test_list_orders_sends_filters(self):
        params = {}

        def handler(request):
            params.update(request.url.params)
            return _ok([records.order_to_record(make_order("ORD-2"))])

        orders = _store(handler).list_orders(
            OrderFilter(shipping_status=ShippingStatus.READY_TO_SHIP)
        )

        assert params["action"] == "getOrders"
        assert params["shippingStatus"] == "Ready to Ship"
        assert [o.id for o in orders] == ["ORD-2"]

    def test_legacy_tracking_column(self):
        record = records.order_to_record(
            make_order("ORD-3", shipping_status=ShippingStatus.SHIPPED)
        )
        record["TrackingNumber"] = ""
        record["JNTTracking"] = "JT777"

        order = _store(lambda request: _ok(record)).get_order("ORD-3")

        assert order.tracking_number == "JT777"

    def test_empty_get_order_is_not_found(self):
        with pytest.raises(NotFoundError):
            _store(lambda request: _ok(None)).get_order("ORD-404")


class TestWrites:

    def test_create_order_returns_assigned_id(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return _ok(orderId="ORD-20260301-001")

        order_id = _store(handler).create_order(make_order(order_id=None))

        assert order_id == "ORD-20260301-001"
        assert bodies[0]["action"] == "createOrder"
        assert bodies[0]["customerName"] == "Juan Dela Cruz"

    def test_update_status_sends_both_tracking_columns(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return _ok()

        _store(handler).update_order_status("ORD-1", StatusUpdate.shipped("JT42"), ADMIN_TOKEN)

        assert bodies == [
            {
                "action": "updateOrderStatus",
                "orderId": "ORD-1",
                "status": {
                    "ShippingStatus": "Shipped",
                    "TrackingNumber": "JT42",
                    "JNTTracking": "JT42",
                },
                "token": ADMIN_TOKEN,
            }
        ]

    def test_trigger_booking_returns_message(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "message": "Booking queued"})

        assert _store(handler).trigger_booking(["ORD-1"], ADMIN_TOKEN) == "Booking queued"


class TestErrorMapping:

    def test_http_401_is_unauthorized(self):
        with pytest.raises(UnauthorizedError):
            _store(lambda request: httpx.Response(401)).trigger_booking(["ORD-1"], "bad")

    def test_error_envelope_invalid_token(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "Invalid token"})

        with pytest.raises(UnauthorizedError):
            _store(handler).update_order_status("ORD-1", StatusUpdate.shipped("JT1"), "bad")

    def test_error_envelope_not_found(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "Order not found"})

        with pytest.raises(NotFoundError):
            _store(handler).get_order("ORD-404")

    def test_other_error_envelope(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "Sheet is locked"})

        with pytest.raises(StoreError, match="Sheet is locked"):
            _store(handler).list_products()

    def test_html_body_is_malformed(self):
        def handler(request):
            return httpx.Response(200, text="<html>Sign in</html>")

        with pytest.raises(UnavailableError, match="malformed"):
            _store(handler).list_products()

    def test_server_error_is_unavailable(self):
        with pytest.raises(UnavailableError):
            _store(lambda request: httpx.Response(503)).list_orders()

    def test_connection_error_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UnavailableError, match="unreachable"):
            _store(handler).list_orders()


class TestLifecycle:

    def test_context_manager_closes_client(self):
        with _store(lambda request: _ok([])) as store:
            assert store.list_products() == []
        assert store._client.is_closed
