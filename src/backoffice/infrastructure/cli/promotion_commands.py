"""CLI commands for the Promotion aggregate."""

from __future__ import annotations

import click

from backoffice.application.add_promotion import AddPromotionHandler
from backoffice.application.delete_promotion import DeletePromotionHandler
from backoffice.application.refresh_promotions import RefreshPromotionsHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.bootstrap import audit_log, unit_of_work
from backoffice.infrastructure.cli.context import CliContext, pass_cli_context


def _parse_ids(raw: str | None) -> list[int]:
    if not raw:
        return []
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise click.BadParameter(f"Invalid product id list '{raw}'.")


@click.command("add")
@click.option("--code", required=True, help="Promotion code (case-insensitive).")
@click.option("--kind", type=click.Choice(["percent", "fixed"]), required=True)
@click.option("--value", required=True, help="Percent (e.g. 15) or fixed amount.")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), required=True)
@click.option("--end", type=click.DateTime(formats=["%Y-%m-%d"]), required=True)
@click.option("--min-order", default="0", help="Minimum order subtotal.")
@click.option("--usage-limit", type=int, default=0, show_default=True, help="0 = unlimited.")
@click.option("--scope", type=click.Choice(["order", "product", "combo"]), default="order",
              show_default=True)
@click.option("--products", default=None, help="Eligible product IDs as '1,2,3'.")
@click.option("--description", default=None)
@pass_cli_context
def promotion_add(
    ctx: CliContext,
    code: str,
    kind: str,
    value: str,
    start,
    end,
    min_order: str,
    usage_limit: int,
    scope: str,
    products: str | None,
    description: str | None,
) -> None:
    """Create a promotion."""
    handler = AddPromotionHandler(uow=unit_of_work(ctx.settings), audit_sink=audit_log(ctx.settings))

    try:
        promo = handler.handle(
            code,
            kind,
            value,
            start.date(),
            end.date(),
            min_order_amount=min_order,
            usage_limit=usage_limit,
            apply_scope=scope,
            product_ids=_parse_ids(products),
            description=description,
            actor=ctx.actor,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Promotion #{promo.id} {promo.describe()} ({promo.status.value})")


@click.command("list")
@pass_cli_context
def promotion_list(ctx: CliContext) -> None:
    """List promotions."""
    try:
        with unit_of_work(ctx.settings) as uow:
            promotions = sorted(uow.promotions.list_all(), key=lambda p: p.id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not promotions:
        click.echo("No promotions found.")
        return

    click.echo(f"{'Code':<12} {'Scope':<8} {'Kind':<8} {'Value':>8} {'Used':>9} {'Valid':<23} {'Status':<8}")
    click.echo("-" * 82)
    for p in promotions:
        used = f"{p.used_count}/{p.usage_limit or '-'}"
        click.echo(
            f"{p.code:<12} {p.apply_scope.value:<8} {p.discount_kind.value:<8} "
            f"{p.discount_value:>8} {used:>9} {p.start_date} - {p.end_date} {p.status.value:<8}"
        )


@click.command("refresh")
@pass_cli_context
def promotion_refresh(ctx: CliContext) -> None:
    """Re-derive every promotion's status from dates and usage."""
    handler = RefreshPromotionsHandler(uow=unit_of_work(ctx.settings))

    try:
        changed = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if changed:
        click.echo("Status changed: " + ", ".join(changed))
    else:
        click.echo("No status changes.")


@click.command("delete")
@click.option("--code", required=True, help="Promotion code (case-insensitive).")
@pass_cli_context
def promotion_delete(ctx: CliContext, code: str) -> None:
    """Retire a promotion for good; orders that used it keep the link."""
    handler = DeletePromotionHandler(uow=unit_of_work(ctx.settings), audit_sink=audit_log(ctx.settings))

    try:
        promo = handler.handle(code, actor=ctx.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Promotion {promo.code} deleted.")
