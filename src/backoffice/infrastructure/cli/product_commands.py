"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from backoffice.application.add_product import AddProductHandler
from backoffice.application.update_product import UpdateProductHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import audit_log, unit_of_work
from backoffice.infrastructure.cli.context import CliContext, pass_cli_context


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Sale price (e.g. 15.00).")
@click.option("--cost-price", default="0", help="Cost price.")
@click.option("--unit", default="pcs", show_default=True, help="Unit of measure.")
@pass_cli_context
def product_add(ctx: CliContext, name: str, price: str, cost_price: str, unit: str) -> None:
    """Add a product to the catalog."""
    handler = AddProductHandler(uow=unit_of_work(ctx.settings), audit_sink=audit_log(ctx.settings))

    try:
        product = handler.handle(name, price, cost_price=cost_price, unit=unit, actor=ctx.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
@pass_cli_context
def product_list(ctx: CliContext) -> None:
    """List the catalog with prices and status."""
    try:
        with unit_of_work(ctx.settings) as uow:
            products = sorted(uow.products.list_all(), key=lambda p: p.id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10} {'Unit':<6} {'Status':<8}")
    click.echo("-" * 54)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {str(p.price):>10} {p.unit:<6} {p.status.value:<8}")


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--price", default=None, help="New sale price (e.g. 29.99).")
@click.option("--status", type=click.Choice(["active", "inactive", "deleted"]), default=None,
              help="New catalog status.")
@pass_cli_context
def product_update(ctx: CliContext, product_id: int, price: str | None, status: str | None) -> None:
    """Change a product's price or status; existing orders keep their prices."""
    handler = UpdateProductHandler(uow=unit_of_work(ctx.settings), audit_sink=audit_log(ctx.settings))

    try:
        product = handler.handle(product_id, new_price=price, new_status=status, actor=ctx.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}': {product.price}, {product.status.value}")
