"""Conversion between spreadsheet rows and domain objects.

The Order Store speaks in sheet column names (``OrderID``,
``ShippingStatus``, ...).  Both store implementations share these helpers
so the wire format is defined in exactly one place.
"""

from __future__ import annotations

from datetime import datetime, timezone

from storefront.domain.exceptions import UnavailableError, ValidationError
from storefront.domain.model.order import (
    Order,
    PaymentMethod,
    PaymentStatus,
    ShippingStatus,
)
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Address, Contact, Money, Quantity
from storefront.domain.repository.order_store import AddressOption, StatusUpdate

_PARSE_ERRORS = (KeyError, TypeError, ValueError, ValidationError)


def product_from_record(raw: dict) -> Product:
    try:
        return Product(
            id=str(raw["ProductID"]),
            name=raw["Name"],
            price=Money.of(raw["Price"]),
            stock=int(raw.get("Stock") or 0),
            description=raw.get("Description") or "",
            size=raw.get("Size") or "",
            category=raw.get("Category") or "",
            image_url=raw.get("ImageURL") or None,
            qr_code_url=raw.get("QRCodeURL") or None,
        )
    except _PARSE_ERRORS as exc:
        raise UnavailableError(f"malformed product record: {exc}") from exc


def product_to_record(product: Product) -> dict:
    return {
        "ProductID": product.id,
        "Name": product.name,
        "Description": product.description,
        "Price": str(product.price.amount),
        "Stock": product.stock,
        "Size": product.size,
        "Category": product.category,
        "ImageURL": product.image_url or "",
        "QRCodeURL": product.qr_code_url or "",
    }


def order_from_record(raw: dict) -> Order:
    try:
        tracking = raw.get("TrackingNumber") or raw.get("JNTTracking") or None
        return Order(
            id=str(raw["OrderID"]),
            product_id=str(raw["ProductID"]),
            product_name=raw.get("ProductName") or "",
            unit_price=Money.of(raw.get("Price") or 0),
            quantity=Quantity(int(raw["Quantity"])),
            customer=Contact(
                name=raw["CustomerName"],
                email=raw.get("Email") or "",
                phone=str(raw.get("Contact") or ""),
            ),
            address=Address(
                province=raw["Province"],
                city=raw["City"],
                barangay=raw["Barangay"],
                details=raw["AddressDetails"],
                district=raw.get("District") or "",
            ),
            payment_method=PaymentMethod(str(raw.get("PaymentMethod") or "gcash").lower()),
            payment_status=PaymentStatus(raw.get("PaymentStatus") or "Pending"),
            shipping_status=ShippingStatus(raw.get("ShippingStatus") or "Pending"),
            tracking_number=str(tracking) if tracking else None,
            package_size=raw.get("PackageSize") or "",
            item_category=raw.get("ItemCategory") or "",
            created_at=_parse_date(raw.get("Date")),
        )
    except _PARSE_ERRORS as exc:
        raise UnavailableError(f"malformed order record: {exc}") from exc


def order_to_record(order: Order) -> dict:
    return {
        "OrderID": order.id,
        "Date": order.created_at.isoformat(),
        "ProductID": order.product_id,
        "ProductName": order.product_name,
        "Price": str(order.unit_price.amount),
        "Quantity": order.quantity.value,
        "CustomerName": order.customer.name,
        "Email": order.customer.email,
        "Contact": order.customer.phone,
        "Province": order.address.province,
        "City": order.address.city,
        "District": order.address.district,
        "Barangay": order.address.barangay,
        "AddressDetails": order.address.details,
        "PackageSize": order.package_size,
        "ItemCategory": order.item_category,
        "PaymentMethod": order.payment_method.value,
        "PaymentStatus": order.payment_status.value,
        "ShippingStatus": order.shipping_status.value,
        "TrackingNumber": order.tracking_number or "",
    }


def create_order_payload(order: Order) -> dict:
    """Fields of the ``createOrder`` action, as the order form sends them."""
    return {
        "productId": order.product_id,
        "quantity": order.quantity.value,
        "customerName": order.customer.name,
        "email": order.customer.email,
        "contact": order.customer.phone,
        "province": order.address.province,
        "city": order.address.city,
        "district": order.address.district,
        "barangay": order.address.barangay,
        "addressDetails": order.address.details,
        "packageSize": order.package_size,
        "itemCategory": order.item_category,
        "paymentMethod": order.payment_method.value,
    }


def status_payload(update: StatusUpdate) -> dict:
    status: dict[str, str] = {}
    if update.payment_status is not None:
        status["PaymentStatus"] = update.payment_status.value
    if update.shipping_status is not None:
        status["ShippingStatus"] = update.shipping_status.value
    if update.tracking_number:
        status["TrackingNumber"] = update.tracking_number
        status["JNTTracking"] = update.tracking_number
    return status


def address_from_record(raw: dict) -> AddressOption:
    try:
        return AddressOption(id=str(raw.get("code") or raw["id"]), name=raw["name"])
    except _PARSE_ERRORS as exc:
        raise UnavailableError(f"malformed address record: {exc}") from exc


def _parse_date(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
