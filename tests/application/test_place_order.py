"""Integration tests for the PlaceOrder use case and the Payment Initiator.

Uses the in-memory fake store, no network.
"""

import pytest

from storefront.application.dto import OrderFormSpec
from storefront.application.initiate_payment import PaymentInitiator
from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.exceptions import ConfigurationError, NotFoundError, ValidationError
from storefront.domain.model.order import PaymentMethod, PaymentStatus, ShippingStatus
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeOrderStore, make_product


def _payments(maya_key: str = "pk-test") -> PaymentInitiator:
    return PaymentInitiator(
        maya_checkout_url="https://checkout.example/v1/checkout",
        maya_public_key=maya_key,
        gcash_qr_reference="/qrph.png",
    )


def _setup(stock: int = 5):
    store = FakeOrderStore(products=[make_product(stock=stock)])
    return PlaceOrderHandler(store, _payments()), store


def _spec(**overrides) -> OrderFormSpec:
    fields = dict(
        product_id="PROD-001",
        quantity=2,
        customer_name="Ana Reyes",
        email="ana@example.com",
        phone="09181234567",
        province="Metro Manila",
        city="Makati",
        barangay="Poblacion",
        address_details="5 Jupiter St",
        payment_method="gcash",
    )
    fields.update(overrides)
    return OrderFormSpec(**fields)


class TestPlaceOrderHappyPath:

    def test_creates_pending_order(self):
        handler, store = _setup()
        placed = handler.handle(_spec())

        order = store.get_order(placed.order_id)
        assert order.payment_status == PaymentStatus.PENDING
        assert order.shipping_status == ShippingStatus.PENDING
        assert order.customer.name == "Ana Reyes"
        assert placed.total == "₱900.00"

    def test_store_takes_stock(self):
        handler, store = _setup(stock=5)
        handler.handle(_spec(quantity=2))
        assert store.get_product("PROD-001").stock == 3

    def test_gcash_returns_qr(self):
        handler, _ = _setup()
        placed = handler.handle(_spec(payment_method="gcash"))
        assert placed.payment.kind == "qr"
        assert placed.payment.target == "/qrph.png"

    def test_maya_returns_checkout_redirect(self):
        handler, _ = _setup()
        placed = handler.handle(_spec(payment_method="Maya"))
        assert placed.payment.kind == "redirect"
        assert placed.payment.target.startswith("https://checkout.example/v1/checkout?")
        assert "amount=900.00" in placed.payment.target
        assert f"order_id={placed.order_id}" in placed.payment.target


class TestPlaceOrderValidation:

    def test_unknown_product(self):
        handler, _ = _setup()
        with pytest.raises(NotFoundError, match="PROD-999"):
            handler.handle(_spec(product_id="PROD-999"))

    def test_over_stock_rejected_and_nothing_created(self):
        handler, store = _setup(stock=1)
        with pytest.raises(ValidationError, match="Insufficient stock"):
            handler.handle(_spec(quantity=2))
        assert store.list_orders() == []

    def test_unsupported_payment_method(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="Unsupported payment method"):
            handler.handle(_spec(payment_method="paypal"))

    def test_missing_address_field(self):
        handler, _ = _setup()
        with pytest.raises(ValidationError, match="city"):
            handler.handle(_spec(city=""))

    def test_unconfigured_maya_leaves_store_untouched(self):
        store = FakeOrderStore(products=[make_product(stock=5)])
        handler = PlaceOrderHandler(store, _payments(maya_key=""))

        with pytest.raises(ConfigurationError, match="MAYA_PUBLIC_KEY"):
            handler.handle(_spec(payment_method="maya"))

        assert store.list_orders() == []
        assert store.get_product("PROD-001").stock == 5


class TestPaymentInitiator:

    def test_maya_without_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="MAYA_PUBLIC_KEY"):
            _payments(maya_key="").initiate("ORD-1", Money.of("100"), PaymentMethod.MAYA)

    def test_gcash_needs_no_key(self):
        instruction = _payments(maya_key="").initiate("ORD-1", Money.of("100"), PaymentMethod.GCASH)
        assert instruction.amount == "₱100.00"
