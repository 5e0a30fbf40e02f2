"""CLI commands for inventory management."""

from __future__ import annotations

import click

from backoffice.application.receive_stock import ReceiveStockHandler
from backoffice.application.show_inventory import ShowInventoryHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import audit_log, unit_of_work
from backoffice.infrastructure.cli.context import CliContext, pass_cli_context


@click.command("receive")
@click.option("--product-id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units received.")
@click.option("--warehouse-id", type=int, default=None, help="Warehouse ID (omit for none).")
@pass_cli_context
def inventory_receive(
    ctx: CliContext, product_id: int, quantity: int, warehouse_id: int | None
) -> None:
    """Receive stock into a warehouse."""
    handler = ReceiveStockHandler(
        uow=unit_of_work(ctx.settings),
        audit_sink=audit_log(ctx.settings),
    )

    try:
        stock = handler.handle(product_id, quantity, actor=ctx.actor, warehouse_id=warehouse_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    where = f"warehouse {warehouse_id}" if warehouse_id is not None else "no warehouse"
    click.echo(f"Product #{product_id}: {stock.quantity} on hand in {where}")


@click.command("show")
@click.option("--product-id", type=int, default=None, help="Only this product.")
@pass_cli_context
def inventory_show(ctx: CliContext, product_id: int | None) -> None:
    """Show stock levels per product and warehouse."""
    handler = ShowInventoryHandler(uow=unit_of_work(ctx.settings))

    try:
        stocks = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not stocks:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Product':<20} {'Warehouse':>10} {'Quantity':>10}")
    click.echo("-" * 49)
    for stock in stocks:
        click.echo(f"{stock.product_id:<6} {stock.product_name:<20} {'total':>10} {stock.total:>10}")
        for wh in stock.warehouses:
            label = str(wh.warehouse_id) if wh.warehouse_id is not None else "-"
            click.echo(f"{'':<6} {'':<20} {label:>10} {wh.quantity:>10}")
