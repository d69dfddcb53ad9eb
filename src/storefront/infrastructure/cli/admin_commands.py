"""CLI commands for the Admin Console."""

from __future__ import annotations

from pathlib import Path

import click

from storefront.application.admin_orders import (
    ALL,
    ListOrdersHandler,
    ShowOrderHandler,
    TriggerBookingHandler,
    UpdateOrderStatusHandler,
    parse_filter,
)
from storefront.application.dto import ActionNotice
from storefront.application.export_orders import ExportOrdersHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import PaymentStatus, ShippingStatus
from storefront.infrastructure.bootstrap import order_store, settings

_PAYMENT_CHOICES = [ALL] + [s.value for s in PaymentStatus]
_SHIPPING_CHOICES = [ALL] + [s.value for s in ShippingStatus]


def _bulk(action: str, order_ids: tuple[str, ...]) -> list[ActionNotice]:
    """Run one status action per id with the configured admin token."""
    try:
        config = settings()
        token = config.require_admin_token()
        with order_store(config) as store:
            handler = UpdateOrderStatusHandler(store, token)
            return handler.bulk(getattr(handler, action), list(order_ids))
    except DomainException as exc:
        raise click.ClickException(str(exc))


def _report(notices: list[ActionNotice], done: str) -> None:
    """Echo one line per order; failures are notices, not aborts."""
    for notice in notices:
        if notice.ok:
            click.echo(f"Order {notice.order_id} {done}.")
        else:
            click.echo(f"error: order {notice.order_id}: {notice.message}", err=True)


@click.command("list")
@click.option("--payment-status", type=click.Choice(_PAYMENT_CHOICES), default=ALL)
@click.option("--shipping-status", type=click.Choice(_SHIPPING_CHOICES), default=ALL)
@click.option("--search", default="", help="Customer name, order ID or tracking number.")
def admin_list(payment_status: str, shipping_status: str, search: str) -> None:
    """List orders."""
    try:
        with order_store(settings()) as store:
            orders = ListOrdersHandler(store).handle(
                parse_filter(payment_status, shipping_status, search)
            )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(
        f"{'Order':<18} {'Customer':<20} {'Product':<18} {'Qty':>4} "
        f"{'Total':>12} {'Payment':<8} {'Shipping':<14} {'Tracking'}"
    )
    click.echo("-" * 110)
    for o in orders:
        click.echo(
            f"{o.id:<18} {o.customer_name:<20} {o.product_name:<18} {o.quantity:>4} "
            f"{o.total:>12} {o.payment_status:<8} {o.shipping_status:<14} {o.tracking_number}"
        )


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def admin_show(order_id: str) -> None:
    """Show details of an order."""
    try:
        with order_store(settings()) as store:
            o = ShowOrderHandler(store).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {o.id}  (payment={o.payment_status}, shipping={o.shipping_status})")
    click.echo(f"Created:  {o.created_at}")
    click.echo(f"Customer: {o.customer_name}  {o.phone}  {o.email}")
    click.echo(f"Address:  {o.address}")
    click.echo(f"Product:  {o.product_name} x{o.quantity} @ {o.unit_price} = {o.total}")
    click.echo(f"Payment:  {o.payment_method}")
    if o.tracking_number:
        click.echo(f"Tracking: {o.tracking_number}")


@click.command("mark-paid")
@click.option("--id", "order_ids", required=True, multiple=True, help="Order ID (repeatable).")
def admin_mark_paid(order_ids: tuple[str, ...]) -> None:
    """Mark orders as paid after reconciling the payment."""
    _report(_bulk("mark_paid", order_ids), "marked paid")


@click.command("ready")
@click.option("--id", "order_ids", required=True, multiple=True, help="Order ID (repeatable).")
def admin_ready(order_ids: tuple[str, ...]) -> None:
    """Mark orders as ready to ship (eligible for booking)."""
    _report(_bulk("mark_ready_to_ship", order_ids), "ready to ship")


@click.command("mark-shipped")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--tracking", required=True, help="Courier tracking number.")
def admin_mark_shipped(order_id: str, tracking: str) -> None:
    """Record a shipment booked outside the dispatcher."""
    try:
        config = settings()
        token = config.require_admin_token()
        with order_store(config) as store:
            UpdateOrderStatusHandler(store, token).mark_shipped(order_id, tracking)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} marked shipped ({tracking}).")


@click.command("book")
@click.option("--id", "order_ids", required=True, multiple=True, help="Order ID (repeatable).")
def admin_book(order_ids: tuple[str, ...]) -> None:
    """Ask the Order Store to queue courier bookings."""
    try:
        config = settings()
        token = config.require_admin_token()
        with order_store(config) as store:
            message = TriggerBookingHandler(store, token).handle(list(order_ids))
    except DomainException as exc:
        raise click.ClickException(f"Failed to trigger booking: {exc}")

    click.echo(message)


@click.command("export")
@click.option("--id", "order_ids", multiple=True, help="Only these orders (repeatable).")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write CSV here instead of stdout.",
)
def admin_export(order_ids: tuple[str, ...], output: Path | None) -> None:
    """Export orders as CSV."""
    try:
        with order_store(settings()) as store:
            text = ExportOrdersHandler(store).handle(list(order_ids))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if output is None:
        click.echo(text, nl=False)
        return
    output.write_text(text, encoding="utf-8")
    click.echo(f"Exported to {output}")
