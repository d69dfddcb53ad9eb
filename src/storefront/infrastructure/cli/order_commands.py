"""CLI commands for the customer-facing side: ordering and address lookup."""

from __future__ import annotations

import click

from storefront.application.dto import OrderFormSpec
from storefront.application.lookup_address import ADDRESS_LEVELS, LookupAddressHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import order_store, payment_initiator, settings


@click.command("place")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to order.")
@click.option("--name", required=True, help="Customer name.")
@click.option("--email", default="", help="Customer email.")
@click.option("--phone", required=True, help="Customer contact number.")
@click.option("--province", required=True)
@click.option("--city", required=True)
@click.option("--district", default="")
@click.option("--barangay", required=True)
@click.option("--details", required=True, help="House number, street, landmark.")
@click.option(
    "--payment",
    type=click.Choice(["maya", "gcash"]),
    default="gcash",
    show_default=True,
    help="Payment method.",
)
def order_place(
    product_id: str,
    quantity: int,
    name: str,
    email: str,
    phone: str,
    province: str,
    city: str,
    district: str,
    barangay: str,
    details: str,
    payment: str,
) -> None:
    """Place an order and start the payment."""
    form = OrderFormSpec(
        product_id=product_id,
        quantity=quantity,
        customer_name=name,
        email=email,
        phone=phone,
        province=province,
        city=city,
        district=district,
        barangay=barangay,
        address_details=details,
        payment_method=payment,
    )

    try:
        config = settings()
        with order_store(config) as store:
            placed = PlaceOrderHandler(store, payment_initiator(config)).handle(form)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {placed.order_id} created  (total {placed.total})")
    if placed.payment.kind == "redirect":
        click.echo(f"Complete your {placed.payment.method} payment at:")
    else:
        click.echo(f"Scan the {placed.payment.method} QR code to pay {placed.payment.amount}:")
    click.echo(f"  {placed.payment.target}")


@click.command("address")
@click.option("--level", type=click.Choice(ADDRESS_LEVELS), required=True)
@click.option("--parent", "parent_id", default="", help="Parent province or city code.")
def address_lookup(level: str, parent_id: str) -> None:
    """List delivery address options."""
    try:
        with order_store(settings()) as store:
            options = LookupAddressHandler(store).handle(level, parent_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for option in options:
        click.echo(f"{option.id:<12} {option.name}")
