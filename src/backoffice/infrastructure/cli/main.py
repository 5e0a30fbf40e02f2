from __future__ import annotations

from pathlib import Path

import click

from backoffice.application.dto import Actor
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.cli.context import CliContext
from backoffice.infrastructure.cli.inventory_commands import inventory_receive, inventory_show
from backoffice.infrastructure.cli.order_commands import (
    order_create,
    order_list,
    order_show,
    order_status,
)
from backoffice.infrastructure.cli.product_commands import product_add, product_list, product_update
from backoffice.infrastructure.cli.promotion_commands import (
    promotion_add,
    promotion_delete,
    promotion_list,
    promotion_refresh,
)
from backoffice.infrastructure.logging_config import configure_logging
from backoffice.infrastructure.settings import Settings


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="BACKOFFICE_DATA_DIR",
    default=None,
    help="Directory holding store.json and audit.jsonl.",
)
@click.option("--user", "username", envvar="BACKOFFICE_USER", default="admin", show_default=True,
              help="Username recorded in the audit trail.")
@click.option("--user-id", type=int, envvar="BACKOFFICE_USER_ID", default=None,
              help="User ID recorded in the audit trail.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Path | None,
    username: str,
    user_id: int | None,
    verbose: bool,
) -> None:
    """Back office: orders, stock and promotions."""
    try:
        settings = Settings.from_env().with_data_dir(data_dir)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    configure_logging(settings.log_level, verbose)
    ctx.obj = CliContext(settings=settings, actor=Actor(user_id=user_id, username=username))


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Manage inventory."""


@cli.group()
def promotion() -> None:
    """Manage promotions."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
inventory.add_command(inventory_receive)
inventory.add_command(inventory_show)
promotion.add_command(promotion_add)
promotion.add_command(promotion_delete)
promotion.add_command(promotion_list)
promotion.add_command(promotion_refresh)
