"""In-memory fakes for testing.

These implement the same abstract interfaces as the HTTP/JSON stores and
the HTTP portal but keep everything in memory. No network, no file I/O.
"""

from __future__ import annotations

from datetime import datetime, timezone

from storefront.domain.exceptions import (
    AuthError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
)
from storefront.domain.model.booking import (
    DispatchSummary,
    PortalCredentials,
    SenderProfile,
    ShipmentFields,
    TrackingId,
)
from storefront.domain.model.order import (
    Order,
    PaymentMethod,
    PaymentStatus,
    ShippingStatus,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Address, Contact, Money, Quantity
from storefront.domain.repository.order_store import (
    AddressOption,
    OrderFilter,
    OrderStore,
    StatusUpdate,
)
from storefront.domain.service.courier_portal import CourierPortal, PortalSession

ADMIN_TOKEN = "s3cret"

SENDER = SenderProfile(
    name="Tindahan ni Aling Nena",
    contact="+639170000000",
    address="12 Mabini St",
    province="Metro Manila",
    city="Quezon City",
    barangay="Bagong Pag-asa",
)

CREDENTIALS = PortalCredentials("shop@example.com", "hunter2")


def make_product(
    product_id: str = "PROD-001",
    name: str = "Tote Bag",
    price: str = "450.00",
    stock: int = 10,
) -> Product:
    return Product(
        id=product_id,
        name=name,
        price=Money.of(price),
        stock=stock,
        description="Canvas tote",
        size="Small",
        category="Bags",
    )


def make_order(
    order_id: str = "ORD-1",
    shipping_status: ShippingStatus = ShippingStatus.READY_TO_SHIP,
    payment_status: PaymentStatus = PaymentStatus.PAID,
    tracking_number: str | None = None,
    quantity: int = 1,
    customer_name: str = "Juan Dela Cruz",
) -> Order:
    return Order(
        id=order_id,
        product_id="PROD-001",
        product_name="Tote Bag",
        unit_price=Money.of("450.00"),
        quantity=Quantity(quantity),
        customer=Contact(name=customer_name, email="juan@example.com", phone="09171234567"),
        address=Address(
            province="Cebu",
            city="Cebu City",
            barangay="Lahug",
            details="45 Gorordo Ave",
        ),
        payment_method=PaymentMethod.GCASH,
        payment_status=payment_status,
        shipping_status=shipping_status,
        tracking_number=tracking_number,
        created_at=datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc),
    )


class FakeOrderStore(OrderStore):

    def __init__(
        self,
        orders: list[Order] | None = None,
        products: list[Product] | None = None,
        token: str = ADMIN_TOKEN,
    ) -> None:
        self._orders: dict[str, Order] = {o.id: o for o in orders or []}
        self._products: dict[str, Product] = {p.id: p for p in products or []}
        self._token = token
        self._next_id = 100
        self.status_updates: list[tuple[str, StatusUpdate]] = []
        self.batches: list[DispatchSummary] = []
        self.booking_requests: list[list[str]] = []
        self.fail_reads: StoreError | None = None
        self.fail_updates: StoreError | None = None
        self.fail_batches: StoreError | None = None
        self.closed = False

    def list_products(self) -> list[Product]:
        self._maybe_fail_read()
        return list(self._products.values())

    def close(self) -> None:
        self.closed = True

    def get_product(self, product_id: str) -> Product:
        self._maybe_fail_read()
        if product_id not in self._products:
            raise NotFoundError(f"Product '{product_id}' not found")
        return self._products[product_id]

    def list_orders(self, order_filter: OrderFilter | None = None) -> list[Order]:
        self._maybe_fail_read()
        order_filter = order_filter or OrderFilter()
        return [o for o in self._orders.values() if order_filter.accepts(o)]

    def get_order(self, order_id: str) -> Order:
        self._maybe_fail_read()
        if order_id not in self._orders:
            raise NotFoundError(f"Order '{order_id}' not found")
        return self._orders[order_id]

    def create_order(self, order: Order) -> str:
        self._next_id += 1
        order.id = f"ORD-{self._next_id}"
        self._orders[order.id] = order
        product = self._products.get(order.product_id)
        if product is not None:
            product.stock -= order.quantity.value
        return order.id

    def update_order_status(self, order_id: str, update: StatusUpdate, token: str) -> None:
        if token != self._token:
            raise UnauthorizedError("Unauthorized")
        if self.fail_updates is not None:
            raise self.fail_updates
        if order_id not in self._orders:
            raise NotFoundError(f"Order '{order_id}' not found")
        update.apply_to(self._orders[order_id])
        self.status_updates.append((order_id, update))

    def trigger_booking(self, order_ids: list[str], token: str) -> str:
        if token != self._token:
            raise UnauthorizedError("Unauthorized")
        self.booking_requests.append(list(order_ids))
        return f"Queued {len(order_ids)} order(s)"

    def record_batch_result(self, summary: DispatchSummary) -> None:
        if self.fail_batches is not None:
            raise self.fail_batches
        self.batches.append(summary)

    def get_addresses(self, level: str, parent_id: str = "") -> list[AddressOption]:
        if level == "province":
            return [AddressOption("0722", "Cebu"), AddressOption("1339", "Metro Manila")]
        return [AddressOption(f"{parent_id}-01", f"{level.title()} of {parent_id}")]

    def _maybe_fail_read(self) -> None:
        if self.fail_reads is not None:
            raise self.fail_reads


class FakeCourierPortal(CourierPortal):
    """Scripted portal.

    ``outcomes`` maps an order id (the ``reference`` field) to either a
    tracking number or an exception to raise.  ``auth_outcomes`` is
    consumed one entry per ``authenticate`` call; ``None`` means success.
    """

    def __init__(
        self,
        outcomes: dict[str, str | Exception] | None = None,
        auth_outcomes: list[Exception | None] | None = None,
        single_use_sessions: bool = False,
    ) -> None:
        self.outcomes = outcomes or {}
        self.auth_outcomes = list(auth_outcomes or [])
        self.single_use_sessions = single_use_sessions
        self.auth_calls = 0
        self.submitted: list[ShipmentFields] = []
        self.closed = False

    def authenticate(self, credentials: PortalCredentials) -> PortalSession:
        self.auth_calls += 1
        outcome = self.auth_outcomes.pop(0) if self.auth_outcomes else None
        if outcome is not None:
            raise outcome
        if credentials.password != CREDENTIALS.password:
            raise AuthError("bad password")
        return PortalSession(username=credentials.username, token=f"session-{self.auth_calls}")

    def is_authenticated(self, session: PortalSession) -> bool:
        return session.active

    def submit_shipment(self, session: PortalSession, fields: ShipmentFields) -> TrackingId:
        self.submitted.append(fields)
        if self.single_use_sessions:
            session.active = False
        outcome = self.outcomes.get(fields["reference"], f"JT{len(self.submitted):06d}")
        if isinstance(outcome, Exception):
            raise outcome
        return TrackingId(outcome)

    def close(self) -> None:
        self.closed = True

    @property
    def submitted_ids(self) -> list[str]:
        return [f["reference"] for f in self.submitted]
