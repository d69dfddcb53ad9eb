"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order
from storefront.domain.model.product import Product


@dataclass(frozen=True)
class OrderFormSpec:
    """Input: everything the customer typed into the order form."""

    product_id: str
    quantity: int
    customer_name: str
    email: str
    phone: str
    province: str
    city: str
    barangay: str
    address_details: str
    payment_method: str
    district: str = ""


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    description: str
    price: str  # formatted, e.g. "₱450.00"
    stock: int
    in_stock: bool
    size: str
    category: str
    image_url: str | None
    qr_code_url: str | None

    @staticmethod
    def from_product(product: Product, qr_code_url: str | None = None) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            description=product.description,
            price=str(product.price),
            stock=product.stock,
            in_stock=product.in_stock,
            size=product.size,
            category=product.category,
            image_url=product.image_url,
            qr_code_url=product.qr_code_url or qr_code_url,
        )


@dataclass(frozen=True)
class PaymentInstruction:
    """How the customer should pay: follow a redirect or scan a QR code."""

    method: str
    kind: str  # "redirect" | "qr"
    target: str
    amount: str


@dataclass(frozen=True)
class PlacedOrderDTO:
    order_id: str
    total: str
    payment: PaymentInstruction


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the admin."""

    id: str
    customer_name: str
    email: str
    phone: str
    address: str
    product_name: str
    quantity: int
    unit_price: str
    total: str
    payment_method: str
    payment_status: str
    shipping_status: str
    tracking_number: str
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id or "",
            customer_name=order.customer.name,
            email=order.customer.email,
            phone=order.customer.phone,
            address=str(order.address),
            product_name=order.product_name,
            quantity=order.quantity.value,
            unit_price=str(order.unit_price),
            total=str(order.total),
            payment_method=order.payment_method.value,
            payment_status=order.payment_status.value,
            shipping_status=order.shipping_status.value,
            tracking_number=order.tracking_number or "",
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class ActionNotice:
    """Per-order outcome of a bulk admin action, shown as a notification."""

    order_id: str
    ok: bool
    message: str
