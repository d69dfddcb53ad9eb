"""HTTP implementation of OrderStore against the spreadsheet web app.

The web app exposes one URL.  Reads are GET requests tagged with an
``action`` query parameter; writes are JSON POSTs carrying ``action`` in
the body.  Every response is an envelope ``{"success", "data", "error"}``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx
import structlog

from storefront.domain.exceptions import (
    NotFoundError,
    StoreError,
    UnauthorizedError,
    UnavailableError,
)
from storefront.domain.model.booking import DispatchSummary
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.repository.order_store import (
    AddressOption,
    OrderFilter,
    OrderStore,
    StatusUpdate,
)
from storefront.infrastructure.store import records

logger = structlog.get_logger(__name__)


class HttpOrderStore(OrderStore):

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._url = url
        # Apps Script answers every call with a redirect to the content host.
        self._client = httpx.Client(
            timeout=timeout, follow_redirects=True, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    # --- OrderStore interface -------------------------------------------------

    def list_products(self) -> list[Product]:
        data = self._get("getProducts") or []
        return [records.product_from_record(raw) for raw in self._as_list(data)]

    def get_product(self, product_id: str) -> Product:
        data = self._get("getProduct", id=product_id)
        if not data:
            raise NotFoundError(f"Product '{product_id}' not found")
        return records.product_from_record(self._as_dict(data))

    def list_orders(self, order_filter: OrderFilter | None = None) -> list[Order]:
        params: dict[str, str] = {}
        if order_filter is not None:
            if order_filter.payment_status is not None:
                params["paymentStatus"] = order_filter.payment_status.value
            if order_filter.shipping_status is not None:
                params["shippingStatus"] = order_filter.shipping_status.value
            if order_filter.search:
                params["search"] = order_filter.search
        data = self._get("getOrders", **params) or []
        return [records.order_from_record(raw) for raw in self._as_list(data)]

    def get_order(self, order_id: str) -> Order:
        data = self._get("getOrder", orderId=order_id)
        if not data:
            raise NotFoundError(f"Order '{order_id}' not found")
        return records.order_from_record(self._as_dict(data))

    def create_order(self, order: Order) -> str:
        body = self._post("createOrder", records.create_order_payload(order))
        data = body.get("data")
        order_id = body.get("orderId") or (data.get("orderId") if isinstance(data, dict) else None)
        if not order_id:
            raise UnavailableError("malformed response: createOrder returned no orderId")
        return str(order_id)

    def update_order_status(self, order_id: str, update: StatusUpdate, token: str) -> None:
        self._post(
            "updateOrderStatus",
            {"orderId": order_id, "status": records.status_payload(update), "token": token},
        )

    def trigger_booking(self, order_ids: list[str], token: str) -> str:
        body = self._post("triggerJtBooking", {"orderIds": list(order_ids), "token": token})
        return str(body.get("message") or "")

    def record_batch_result(self, summary: DispatchSummary) -> None:
        self._post(
            "jtCallback",
            {
                "results": summary.to_payload(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    def get_addresses(self, level: str, parent_id: str = "") -> list[AddressOption]:
        params = {"level": level}
        if parent_id:
            params["parentId"] = parent_id
        data = self._get("getAddress", **params) or []
        return [records.address_from_record(raw) for raw in self._as_list(data)]

    # --- Transport helpers ----------------------------------------------------

    def _get(self, action: str, **params: str) -> Any:
        logger.debug("Order Store request", method="GET", action=action, params=params)
        try:
            response = self._client.get(self._url, params={"action": action, **params})
        except httpx.HTTPError as exc:
            raise UnavailableError(f"Order Store unreachable ({action}): {exc}") from exc
        return self._unwrap(action, response).get("data")

    def _post(self, action: str, payload: dict) -> dict:
        logger.debug("Order Store request", method="POST", action=action)
        try:
            response = self._client.post(self._url, json={"action": action, **payload})
        except httpx.HTTPError as exc:
            raise UnavailableError(f"Order Store unreachable ({action}): {exc}") from exc
        return self._unwrap(action, response)

    @staticmethod
    def _unwrap(action: str, response: httpx.Response) -> dict:
        if response.status_code in (401, 403):
            raise UnauthorizedError(f"{action}: admin token rejected")
        if response.status_code == 404:
            raise NotFoundError(f"{action}: not found")
        if response.status_code >= 400:
            raise UnavailableError(f"{action}: HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise UnavailableError(f"malformed response from {action}: not JSON") from exc
        if not isinstance(body, dict):
            raise UnavailableError(f"malformed response from {action}: expected an object")

        error = body.get("error")
        if body.get("success") is False or error:
            message = str(error or f"{action} failed")
            lowered = message.lower()
            if "unauthorized" in lowered or "invalid token" in lowered:
                raise UnauthorizedError(message)
            if "not found" in lowered:
                raise NotFoundError(message)
            raise StoreError(message)
        return body

    @staticmethod
    def _as_list(data: Any) -> list[dict]:
        if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
            raise UnavailableError("malformed response: expected a list of records")
        return data

    @staticmethod
    def _as_dict(data: Any) -> dict:
        if not isinstance(data, dict):
            raise UnavailableError("malformed response: expected a record")
        return data
