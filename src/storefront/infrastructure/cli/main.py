import click

from storefront.infrastructure.cli.admin_commands import (
    admin_book,
    admin_export,
    admin_list,
    admin_mark_paid,
    admin_mark_shipped,
    admin_ready,
    admin_show,
)
from storefront.infrastructure.cli.dispatch_commands import dispatch
from storefront.infrastructure.cli.order_commands import address_lookup, order_place
from storefront.infrastructure.cli.product_commands import product_list, product_show
from storefront.infrastructure.logging_setup import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging.")
def cli(verbose: bool) -> None:
    """Storefront orders, payments and courier bookings."""
    configure_logging(verbose)


@cli.group()
def product() -> None:
    """Browse the catalog."""


@cli.group()
def order() -> None:
    """Place orders."""


@cli.group()
def admin() -> None:
    """Manage orders (requires ADMIN_TOKEN)."""


# Register subcommands
product.add_command(product_list)
product.add_command(product_show)
order.add_command(order_place)
admin.add_command(admin_list)
admin.add_command(admin_show)
admin.add_command(admin_mark_paid)
admin.add_command(admin_ready)
admin.add_command(admin_mark_shipped)
admin.add_command(admin_book)
admin.add_command(admin_export)
cli.add_command(address_lookup)
cli.add_command(dispatch)
