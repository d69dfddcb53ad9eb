"""JSON-file-backed implementation of OrderStore.

Plays the spreadsheet's role on a developer machine: same records, same
id scheme, and it verifies the admin token itself just as the hosted
web app does.
"""

from __future__ import annotations

import hmac
import json
from datetime import datetime, timezone
from pathlib import Path

from storefront.domain.exceptions import (
    NotFoundError,
    UnauthorizedError,
    UnavailableError,
    ValidationError,
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


class JsonOrderStore(OrderStore):

    def __init__(self, data_dir: Path, admin_token: str = "") -> None:
        self._data_dir = data_dir
        self._admin_token = admin_token
        self._products_file = data_dir / "products.json"
        self._orders_file = data_dir / "orders.json"
        self._batches_file = data_dir / "batch_results.json"
        self._requests_file = data_dir / "booking_requests.json"
        self._addresses_file = data_dir / "addresses.json"
        for path in (
            self._products_file,
            self._orders_file,
            self._batches_file,
            self._requests_file,
        ):
            self._ensure_file(path, "[]")
        self._ensure_file(self._addresses_file, "{}")

    # --- Products -------------------------------------------------------------

    def list_products(self) -> list[Product]:
        return [records.product_from_record(raw) for raw in self._load(self._products_file)]

    def get_product(self, product_id: str) -> Product:
        for product in self.list_products():
            if product.id == product_id:
                return product
        raise NotFoundError(f"Product '{product_id}' not found")

    # --- Orders ---------------------------------------------------------------

    def list_orders(self, order_filter: OrderFilter | None = None) -> list[Order]:
        orders = [records.order_from_record(raw) for raw in self._load(self._orders_file)]
        if order_filter is None:
            return orders
        return [o for o in orders if order_filter.accepts(o)]

    def get_order(self, order_id: str) -> Order:
        for raw in self._load(self._orders_file):
            if str(raw.get("OrderID")) == order_id:
                return records.order_from_record(raw)
        raise NotFoundError(f"Order '{order_id}' not found")

    def create_order(self, order: Order) -> str:
        products = self._load(self._products_file)
        product_raw = next(
            (p for p in products if str(p.get("ProductID")) == order.product_id), None
        )
        if product_raw is None:
            raise NotFoundError(f"Product '{order.product_id}' not found")

        product = records.product_from_record(product_raw)
        if not product.can_supply(order.quantity.value):
            raise ValidationError(
                f"Insufficient stock for {product.name} "
                f"(need {order.quantity.value}, have {product.stock})"
            )
        product_raw["Stock"] = product.stock - order.quantity.value

        orders = self._load(self._orders_file)
        order.id = self._next_id(orders, order.created_at)
        orders.append(records.order_to_record(order))

        self._persist(self._products_file, products)
        self._persist(self._orders_file, orders)
        return order.id

    def update_order_status(self, order_id: str, update: StatusUpdate, token: str) -> None:
        self._verify_token(token)
        orders = self._load(self._orders_file)
        for i, raw in enumerate(orders):
            if str(raw.get("OrderID")) == order_id:
                order = records.order_from_record(raw)
                update.apply_to(order)
                orders[i] = records.order_to_record(order)
                self._persist(self._orders_file, orders)
                return
        raise NotFoundError(f"Order '{order_id}' not found")

    def trigger_booking(self, order_ids: list[str], token: str) -> str:
        self._verify_token(token)
        known = {str(raw.get("OrderID")) for raw in self._load(self._orders_file)}
        missing = [i for i in order_ids if i not in known]
        if missing:
            raise NotFoundError(f"Order(s) not found: {', '.join(missing)}")

        requests = self._load(self._requests_file)
        requests.append(
            {"orderIds": list(order_ids), "requestedAt": datetime.now(timezone.utc).isoformat()}
        )
        self._persist(self._requests_file, requests)
        return f"Queued {len(order_ids)} order(s) for booking"

    def record_batch_result(self, summary: DispatchSummary) -> None:
        batches = self._load(self._batches_file)
        batches.append(
            {"results": summary.to_payload(), "timestamp": datetime.now(timezone.utc).isoformat()}
        )
        self._persist(self._batches_file, batches)

    def batch_results(self) -> list[dict]:
        return self._load(self._batches_file)

    # --- Addresses ------------------------------------------------------------

    def get_addresses(self, level: str, parent_id: str = "") -> list[AddressOption]:
        tree = self._load(self._addresses_file)
        if not isinstance(tree, dict):
            raise UnavailableError("malformed address file: expected an object")
        entries = tree.get(level, [])
        if isinstance(entries, dict):
            entries = entries.get(parent_id, [])
        return [records.address_from_record(raw) for raw in entries]

    # --- Helpers --------------------------------------------------------------

    def _verify_token(self, token: str) -> None:
        if not self._admin_token or not hmac.compare_digest(
            token.encode("utf-8"), self._admin_token.encode("utf-8")
        ):
            raise UnauthorizedError("Unauthorized: invalid admin token")

    @staticmethod
    def _next_id(orders: list[dict], created_at: datetime) -> str:
        prefix = f"ORD-{created_at:%Y%m%d}-"
        taken = [
            int(str(o["OrderID"])[len(prefix):])
            for o in orders
            if str(o.get("OrderID", "")).startswith(prefix)
            and str(o["OrderID"])[len(prefix):].isdigit()
        ]
        return f"{prefix}{max(taken, default=0) + 1:03d}"

    @staticmethod
    def _load(path: Path):
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise UnavailableError(f"malformed data file {path.name}: {exc}") from exc

    @staticmethod
    def _persist(path: Path, data) -> None:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    @staticmethod
    def _ensure_file(path: Path, empty: str) -> None:
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(empty, encoding="utf-8")
