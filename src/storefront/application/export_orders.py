"""Application service: Export Orders as CSV (query)."""

from __future__ import annotations

import csv
import io

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import Order
from storefront.domain.repository.order_store import OrderFilter, OrderStore

CSV_HEADER = [
    "Order ID",
    "Tracking Number",
    "Customer",
    "Product",
    "Quantity",
    "Amount",
    "Payment Status",
    "Shipping Status",
    "Date",
]


class ExportOrdersHandler:

    def __init__(self, store: OrderStore) -> None:
        self._store = store

    def handle(self, order_ids: list[str] | None = None) -> str:
        """Return CSV text for the selected orders, or every order if none selected.

        Raises EntityNotFoundError naming any selected id the Store does not know.
        """
        orders = self._store.list_orders(OrderFilter())
        if order_ids:
            known = {o.id for o in orders}
            unknown = [i for i in order_ids if i not in known]
            if unknown:
                raise EntityNotFoundError(f"Unknown order id(s): {', '.join(unknown)}")
            wanted = set(order_ids)
            orders = [o for o in orders if o.id in wanted]

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for order in orders:
            writer.writerow(self._to_row(order))
        return buffer.getvalue()

    @staticmethod
    def _to_row(order: Order) -> list[str]:
        return [
            order.id or "",
            order.tracking_number or "",
            order.customer.name,
            order.product_name,
            str(order.quantity.value),
            f"{order.total.amount:.2f}",
            order.payment_status.value,
            order.shipping_status.value,
            order.created_at.strftime("%Y-%m-%d"),
        ]
