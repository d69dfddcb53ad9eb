"""Abstract Order Store — the spreadsheet-backed API that owns products and orders.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (HTTP, JSON file) live in the
infrastructure layer.

Every method either returns a value or raises a ``StoreError`` subclass
(``NotFoundError``, ``UnauthorizedError``, ``UnavailableError``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.model.booking import DispatchSummary
from storefront.domain.model.order import Order, PaymentStatus, ShippingStatus
from storefront.domain.model.product import Product


@dataclass(frozen=True)
class OrderFilter:
    """Admin list filters. ``None`` means "all"."""

    payment_status: PaymentStatus | None = None
    shipping_status: ShippingStatus | None = None
    search: str = ""

    def accepts(self, order: Order) -> bool:
        if self.payment_status and order.payment_status != self.payment_status:
            return False
        if self.shipping_status and order.shipping_status != self.shipping_status:
            return False
        return order.matches(self.search)


@dataclass(frozen=True)
class StatusUpdate:
    """Partial status change; unset fields are left untouched."""

    payment_status: PaymentStatus | None = None
    shipping_status: ShippingStatus | None = None
    tracking_number: str | None = None

    @staticmethod
    def shipped(tracking_number: str) -> StatusUpdate:
        return StatusUpdate(
            shipping_status=ShippingStatus.SHIPPED, tracking_number=tracking_number
        )

    def apply_to(self, order: Order) -> None:
        """Apply the update to *order* through its guarded transitions."""
        if self.payment_status == PaymentStatus.PAID:
            order.mark_paid()
        if self.shipping_status == ShippingStatus.READY_TO_SHIP:
            order.mark_ready_to_ship()
        elif self.shipping_status == ShippingStatus.SHIPPED:
            order.mark_shipped(self.tracking_number or "")


@dataclass(frozen=True)
class AddressOption:
    id: str
    name: str


class OrderStore(ABC):
    """Use as a context manager so any connection it holds is released."""

    @abstractmethod
    def list_products(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def get_product(self, product_id: str) -> Product:
        """Return one product; raises NotFoundError."""

    @abstractmethod
    def list_orders(self, order_filter: OrderFilter | None = None) -> list[Order]:
        """Return orders matching *order_filter*, oldest first."""

    @abstractmethod
    def get_order(self, order_id: str) -> Order:
        """Return one order; raises NotFoundError."""

    @abstractmethod
    def create_order(self, order: Order) -> str:
        """Persist a new order and return the id the Store assigned."""

    @abstractmethod
    def update_order_status(self, order_id: str, update: StatusUpdate, token: str) -> None:
        """Apply a partial status change (admin token required)."""

    @abstractmethod
    def trigger_booking(self, order_ids: list[str], token: str) -> str:
        """Ask the Store to queue a courier booking run; returns its message."""

    @abstractmethod
    def record_batch_result(self, summary: DispatchSummary) -> None:
        """Store a dispatch run's summary for audit/history."""

    @abstractmethod
    def get_addresses(self, level: str, parent_id: str = "") -> list[AddressOption]:
        """Return address options for province / city / barangay."""

    def close(self) -> None:
        """Release connections; stores without any keep this no-op."""

    def __enter__(self) -> OrderStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
