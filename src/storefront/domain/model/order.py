"""Order aggregate — the core of the domain.

An order tracks two independent axes: payment (Pending -> Paid) and
shipping (Pending -> Ready to Ship -> Shipped).  Every transition method
touches exactly one axis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Address, Contact, Money, Quantity


class PaymentMethod(Enum):
    MAYA = "maya"
    GCASH = "gcash"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"


class ShippingStatus(Enum):
    PENDING = "Pending"
    READY_TO_SHIP = "Ready to Ship"
    SHIPPED = "Shipped"


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    Store client can reconstitute persisted orders without re-validating.
    """

    id: str | None
    product_id: str
    product_name: str
    unit_price: Money  # locked at order-creation time
    quantity: Quantity
    customer: Contact
    address: Address
    payment_method: PaymentMethod
    payment_status: PaymentStatus = PaymentStatus.PENDING
    shipping_status: ShippingStatus = ShippingStatus.PENDING
    tracking_number: str | None = None
    package_size: str = ""
    item_category: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        product: Product,
        quantity: int,
        customer: Contact,
        address: Address,
        payment_method: PaymentMethod,
    ) -> Order:
        """Create a new order against *product*, enforcing stock limits."""
        qty = Quantity(quantity)
        if not product.can_supply(qty.value):
            raise ValidationError(
                f"Insufficient stock for {product.name} "
                f"(need {qty.value}, have {product.stock})"
            )
        return Order(
            id=None,
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=qty,
            customer=customer,
            address=address,
            payment_method=payment_method,
            package_size=product.size,
            item_category=product.category,
        )

    # --- Payment axis ---------------------------------------------------------

    def mark_paid(self) -> None:
        if self.payment_status == PaymentStatus.PAID:
            raise ValidationError(f"Order {self.id} is already paid")
        self.payment_status = PaymentStatus.PAID

    # --- Shipping axis --------------------------------------------------------

    def mark_ready_to_ship(self) -> None:
        """Transition Pending -> Ready to Ship (admin action)."""
        if self.shipping_status != ShippingStatus.PENDING:
            raise ValidationError(
                f"Cannot mark order {self.id} ready to ship: current status is "
                f"{self.shipping_status.value}, expected Pending"
            )
        self.shipping_status = ShippingStatus.READY_TO_SHIP

    def mark_shipped(self, tracking_number: str) -> None:
        """Record a courier booking.  A tracking number is mandatory."""
        if not tracking_number or not tracking_number.strip():
            raise ValidationError("A tracking number is required to mark an order shipped")
        if self.shipping_status == ShippingStatus.SHIPPED:
            raise ValidationError(
                f"Order {self.id} already shipped (tracking {self.tracking_number})"
            )
        self.tracking_number = tracking_number.strip()
        self.shipping_status = ShippingStatus.SHIPPED

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def is_bookable(self) -> bool:
        return self.shipping_status == ShippingStatus.READY_TO_SHIP

    def matches(self, term: str) -> bool:
        """Admin search over customer name, order id and tracking number."""
        if not term:
            return True
        needle = term.lower()
        return any(
            needle in (value or "").lower()
            for value in (self.customer.name, self.id, self.tracking_number)
        )
