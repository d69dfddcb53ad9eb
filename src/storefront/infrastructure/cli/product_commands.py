"""CLI commands for browsing the catalog."""

from __future__ import annotations

import click

from storefront.application.browse_products import ListProductsHandler, ShowProductHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import order_store, settings


@click.command("list")
@click.option("--search", default="", help="Filter by name, description or category.")
def product_list(search: str) -> None:
    """List products in the catalog."""
    try:
        config = settings()
        with order_store(config) as store:
            handler = ListProductsHandler(store, storefront_url=config.storefront_url)
            products = handler.handle(search=search)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<10} {'Name':<24} {'Price':>12} {'Stock':>6}  {'Category / Size'}")
    click.echo("-" * 72)
    for p in products:
        stock = str(p.stock) if p.in_stock else "out"
        click.echo(
            f"{p.id:<10} {p.name:<24} {p.price:>12} {stock:>6}  {p.category} / {p.size}"
        )


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show one product."""
    try:
        with order_store(settings()) as store:
            p = ShowProductHandler(store).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {p.id}: {p.name}")
    click.echo(f"  {p.description}")
    click.echo(f"  Price:    {p.price}")
    click.echo(f"  Stock:    {p.stock if p.in_stock else 'Out of stock'}")
    click.echo(f"  Category: {p.category}  Size: {p.size}")
    if p.image_url:
        click.echo(f"  Image:    {p.image_url}")
    if p.qr_code_url:
        click.echo(f"  QR:       {p.qr_code_url}")
