"""Application services: Admin Console use cases.

The admin token is forwarded to the Order Store, which verifies it.
Bulk actions run per order and report each failure as a notice instead
of stopping at the first one.
"""

from __future__ import annotations

import copy
from collections.abc import Callable

import structlog

from storefront.application.dto import ActionNotice, OrderDTO
from storefront.domain.exceptions import DomainException, ValidationError
from storefront.domain.model.order import PaymentStatus, ShippingStatus
from storefront.domain.repository.order_store import (
    OrderFilter,
    OrderStore,
    StatusUpdate,
)

logger = structlog.get_logger(__name__)

ALL = "all"


def parse_filter(
    payment_status: str = ALL, shipping_status: str = ALL, search: str = ""
) -> OrderFilter:
    """Build an OrderFilter from the console's string options."""
    try:
        payment = None if payment_status == ALL else PaymentStatus(payment_status)
        shipping = None if shipping_status == ALL else ShippingStatus(shipping_status)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    return OrderFilter(payment_status=payment, shipping_status=shipping, search=search)


class ListOrdersHandler:

    def __init__(self, store: OrderStore) -> None:
        self._store = store

    def handle(self, order_filter: OrderFilter | None = None) -> list[OrderDTO]:
        order_filter = order_filter or OrderFilter()
        # The Store filters by status; search is re-applied here because
        # not every Store implementation honours it.
        orders = self._store.list_orders(order_filter)
        return [OrderDTO.from_order(o) for o in orders if order_filter.accepts(o)]


class ShowOrderHandler:

    def __init__(self, store: OrderStore) -> None:
        self._store = store

    def handle(self, order_id: str) -> OrderDTO:
        return OrderDTO.from_order(self._store.get_order(order_id))


class UpdateOrderStatusHandler:
    """Manual status transitions: mark paid, ready to ship, shipped."""

    def __init__(self, store: OrderStore, token: str) -> None:
        self._store = store
        self._token = token

    def mark_paid(self, order_id: str) -> None:
        self._apply(order_id, StatusUpdate(payment_status=PaymentStatus.PAID))

    def mark_ready_to_ship(self, order_id: str) -> None:
        self._apply(order_id, StatusUpdate(shipping_status=ShippingStatus.READY_TO_SHIP))

    def mark_shipped(self, order_id: str, tracking_number: str) -> None:
        self._apply(order_id, StatusUpdate.shipped(tracking_number))

    def bulk(
        self, action: Callable[[str], None], order_ids: list[str]
    ) -> list[ActionNotice]:
        """Run *action* for each id; one failure never stops the rest."""
        notices: list[ActionNotice] = []
        for order_id in order_ids:
            try:
                action(order_id)
            except DomainException as exc:
                logger.warning("Admin action failed", order_id=order_id, error=str(exc))
                notices.append(ActionNotice(order_id, ok=False, message=str(exc)))
            else:
                notices.append(ActionNotice(order_id, ok=True, message="updated"))
        return notices

    def _apply(self, order_id: str, update: StatusUpdate) -> None:
        # Validate the transition on a copy first so an illegal edit never
        # reaches the Store.
        order = self._store.get_order(order_id)
        update.apply_to(copy.copy(order))
        self._store.update_order_status(order_id, update, self._token)
        logger.info("Order status updated", order_id=order_id, update=update)


class TriggerBookingHandler:
    """Ask the Store to queue a courier booking for the selected orders."""

    def __init__(self, store: OrderStore, token: str) -> None:
        self._store = store
        self._token = token

    def handle(self, order_ids: list[str]) -> str:
        if not order_ids:
            raise ValidationError("Select at least one order to book")
        message = self._store.trigger_booking(order_ids, self._token)
        logger.info("Booking triggered", orders=len(order_ids))
        return message or "Booking triggered successfully"
