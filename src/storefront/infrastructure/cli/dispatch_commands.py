"""CLI command for the Booking Dispatcher.

Exit codes:
    0  the run completed, even if some orders failed (see the summary)
    1  setup failed: bad configuration or the orders could not be fetched
    2  usage error (neither or both of --order-id / --all-ready)
"""

from __future__ import annotations

import click

from storefront.domain.exceptions import ConfigurationError, FetchError
from storefront.domain.model.booking import DispatchSummary, OrderSelector
from storefront.infrastructure.bootstrap import booking_dispatcher, order_store, settings


def _print_summary(summary: DispatchSummary) -> None:
    click.echo("================================")
    click.echo("Summary")
    click.echo("================================")
    click.echo(f"Total orders:  {summary.total}")
    click.echo(f"Booked:        {len(summary.succeeded)}")
    click.echo(f"Failed:        {len(summary.failed)}")
    click.echo(f"Indeterminate: {len(summary.indeterminate)}")

    if summary.succeeded:
        click.echo("\nSuccessful bookings:")
        for order_id, tracking in summary.succeeded:
            click.echo(f"  {order_id}: {tracking}")
    if summary.failed:
        click.echo("\nFailed bookings:")
        for order_id, reason in summary.failed:
            click.echo(f"  {order_id}: {reason}")
    if summary.indeterminate:
        click.echo("\nNeeds manual check on the courier portal:")
        for order_id, reason in summary.indeterminate:
            click.echo(f"  {order_id}: {reason}")


@click.command("dispatch")
@click.option("--order-id", default=None, help="Book a single order.")
@click.option("--all-ready", is_flag=True, default=False, help="Book every Ready to Ship order.")
def dispatch(order_id: str | None, all_ready: bool) -> None:
    """Book courier shipments for ready-to-ship orders.

    Exits 0 when the run completes, even if individual orders failed;
    failures are listed in the summary.
    """
    if bool(order_id) == all_ready:
        raise click.UsageError("Pass exactly one of --order-id or --all-ready.")

    selector = OrderSelector.ready_to_ship() if all_ready else OrderSelector.single(order_id)

    try:
        config = settings()
        with order_store(config) as store:
            summary = booking_dispatcher(config, store).dispatch(selector)
    except (ConfigurationError, FetchError) as exc:
        raise click.ClickException(str(exc))

    if summary.total == 0:
        click.echo("No orders to process.")
        return
    _print_summary(summary)
