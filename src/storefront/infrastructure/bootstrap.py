"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.application.dispatch_bookings import BookingDispatcher
from storefront.application.initiate_payment import PaymentInitiator
from storefront.domain.repository.order_store import OrderStore
from storefront.domain.service.courier_portal import ShipmentFieldMapper
from storefront.infrastructure.config import Settings
from storefront.infrastructure.portal.field_mapping import load_field_mapping
from storefront.infrastructure.portal.http_courier_portal import HttpCourierPortal
from storefront.infrastructure.store.http_order_store import HttpOrderStore
from storefront.infrastructure.store.json_order_store import JsonOrderStore


def settings() -> Settings:
    return Settings.from_env()


def order_store(config: Settings) -> OrderStore:
    """The hosted web app when APPS_SCRIPT_URL is set, local JSON files otherwise."""
    if config.store_url:
        return HttpOrderStore(config.store_url)
    return JsonOrderStore(config.data_dir, admin_token=config.admin_token)


def payment_initiator(config: Settings) -> PaymentInitiator:
    return PaymentInitiator(
        maya_checkout_url=config.maya_checkout_url,
        maya_public_key=config.maya_public_key,
        gcash_qr_reference=config.gcash_qr_reference,
    )


def booking_dispatcher(config: Settings, store: OrderStore) -> BookingDispatcher:
    credentials = config.require_portal_credentials()
    mapper = ShipmentFieldMapper(
        load_field_mapping(config.field_mapping_path), config.sender
    )
    return BookingDispatcher(
        store=store,
        portal_factory=lambda: HttpCourierPortal(
            config.portal_url, timeout=config.portal_timeout
        ),
        credentials=credentials,
        mapper=mapper,
        admin_token=config.require_admin_token(),
    )
