"""Application service: Place Order use case.

Orchestrates the flow between the Order Store and the domain model:
look up the product, let the Order aggregate validate the request,
create it in the Store, then hand off to the Payment Initiator.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderFormSpec, PlacedOrderDTO
from storefront.application.initiate_payment import PaymentInitiator
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order, PaymentMethod
from storefront.domain.model.value_objects import Address, Contact
from storefront.domain.repository.order_store import OrderStore

logger = structlog.get_logger(__name__)


class PlaceOrderHandler:

    def __init__(self, store: OrderStore, payments: PaymentInitiator) -> None:
        self._store = store
        self._payments = payments

    def handle(self, form: OrderFormSpec) -> PlacedOrderDTO:
        """Place a new order.

        Steps:
        1. Check the payment method can be started (ConfigurationError if not).
        2. Resolve the product (NotFoundError if unknown).
        3. Build the Order with the *current* price and stock check.
        4. Create it in the Store, which assigns the id and takes stock.
        5. Start the payment.
        """
        try:
            method = PaymentMethod(form.payment_method.lower())
        except ValueError:
            raise ValidationError(
                f"Unsupported payment method '{form.payment_method}'"
            ) from None
        # Before anything is written: a created order already holds stock.
        self._payments.check(method)

        product = self._store.get_product(form.product_id)

        order = Order.create(
            product=product,
            quantity=form.quantity,
            customer=Contact(
                name=form.customer_name.strip(),
                email=form.email.strip(),
                phone=form.phone.strip(),
            ),
            address=Address(
                province=form.province,
                city=form.city,
                barangay=form.barangay,
                details=form.address_details,
                district=form.district,
            ),
            payment_method=method,
        )

        order_id = self._store.create_order(order)
        order.id = order_id
        logger.info(
            "Order created", order_id=order_id, product=product.name, quantity=form.quantity
        )

        payment = self._payments.initiate(order_id, order.total, method)
        return PlacedOrderDTO(order_id=order_id, total=str(order.total), payment=payment)
