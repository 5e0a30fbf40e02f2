"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from backoffice.application.create_order import CreateOrderHandler
from backoffice.application.dto import CreateOrderRequest, OrderLineRequest, OrderResult
from backoffice.application.show_order import ListOrdersHandler, ShowOrderHandler
from backoffice.application.update_order_status import UpdateOrderStatusHandler
from backoffice.domain.exceptions import DomainException, InsufficientStockError
from backoffice.infrastructure.bootstrap import audit_log, identity_directory, unit_of_work
from backoffice.infrastructure.cli.context import CliContext, pass_cli_context


def _money(amount) -> str:
    return f"${amount:,.2f}"


def _parse_items(raw: str) -> list[OrderLineRequest]:
    """Parse '1:3,2:5' into OrderLineRequest list."""
    lines: list[OrderLineRequest] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        pid_str, qty_str = pair.rsplit(":", 1)
        try:
            product_id = int(pid_str)
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid product id or quantity in '{pair}'."
            )
        lines.append(OrderLineRequest(product_id=product_id, quantity=qty))
    return lines


def _display_order(dto: OrderResult) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.number} (#{dto.id})  status={dto.status}")
    customer = dto.customer_name or (
        f"#{dto.customer_id}" if dto.customer_id is not None else "walk-in"
    )
    click.echo(f"Customer: {customer}")
    if dto.user_id is not None:
        click.echo(f"Staff:    {dto.user_name or f'#{dto.user_id}'}")
    click.echo(f"Created:  {dto.created_at:%Y-%m-%d %H:%M}")
    click.echo()
    click.echo(
        f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Discount':>10} {'%':>7} {'Total':>10}"
    )
    click.echo(f"  {'-'*67}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<20} {line.quantity:>5} {_money(line.unit_price):>10} "
            f"{_money(line.discount_amount):>10} {line.discount_percent:>6}% "
            f"{_money(line.subtotal):>10}"
        )
    click.echo(f"  {'-'*67}")
    click.echo(f"  {'Subtotal':<27} {_money(dto.subtotal):>40}")
    if dto.promotion_description:
        click.echo(f"  Promotion: {dto.promotion_description}")
    click.echo(f"  {'Discount':<27} {_money(dto.discount_amount):>40}")
    click.echo(f"  {'Order Total':<27} {_money(dto.final_total):>40}")
    if dto.payment_method:
        click.echo(f"  Paid by {dto.payment_method}")


@click.command("create")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--customer-id", type=int, default=None, help="Customer ID.")
@click.option("--promo", "promo_code", default=None, help="Promotion code.")
@click.option("--payment-method", default=None, help="Payment method (default from settings).")
@pass_cli_context
def order_create(
    ctx: CliContext,
    items: str,
    customer_id: int | None,
    promo_code: str | None,
    payment_method: str | None,
) -> None:
    """Create an order: check stock, apply promotion, take payment."""
    request = CreateOrderRequest(
        lines=tuple(_parse_items(items)),
        customer_id=customer_id,
        user_id=ctx.actor.user_id,
        promo_code=promo_code,
        payment_method=payment_method,
    )
    settings = ctx.settings
    handler = CreateOrderHandler(
        uow=unit_of_work(settings),
        audit_sink=audit_log(settings),
        identity=identity_directory(settings),
        default_payment_method=settings.default_payment_method,
        timeout=settings.transaction_timeout,
    )

    try:
        dto = handler.handle(request, actor=ctx.actor)
    except InsufficientStockError as exc:
        lines = [
            f"  product {s.product_id}: requested {s.requested}, available {s.available}"
            for s in exc.shortages
        ]
        raise click.ClickException("Insufficient stock:\n" + "\n".join(lines))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.promotion_rejection:
        click.echo(f"Promotion '{promo_code}' not applied: {dto.promotion_rejection}")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@pass_cli_context
def order_show(ctx: CliContext, order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(
        uow=unit_of_work(ctx.settings),
        identity=identity_directory(ctx.settings),
    )

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--status", default=None, help="Only orders in this status.")
@pass_cli_context
def order_list(ctx: CliContext, status: str | None) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(
        uow=unit_of_work(ctx.settings),
        identity=identity_directory(ctx.settings),
    )
    try:
        orders = handler.handle(status=status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Number':<10} {'Date':<17} {'Status':<10} {'Items':>5} {'Discount':>10} {'Total':>12}")
    click.echo("-" * 69)
    for dto in orders:
        click.echo(
            f"{dto.number:<10} {dto.created_at:%Y-%m-%d %H:%M} {dto.status:<10} "
            f"{len(dto.lines):>5} {_money(dto.discount_amount):>10} {_money(dto.final_total):>12}"
        )


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--to", "new_status", required=True, help="pending, paid, completed or cancelled.")
@click.option("--override", is_flag=True, default=False, help="Admin override of the one-way rule.")
@pass_cli_context
def order_status(ctx: CliContext, order_id: int, new_status: str, override: bool) -> None:
    """Change an order's status."""
    handler = UpdateOrderStatusHandler(
        uow=unit_of_work(ctx.settings),
        audit_sink=audit_log(ctx.settings),
    )

    try:
        handler.handle(order_id, new_status, actor=ctx.actor, override=override)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {new_status.strip().lower()}.")
