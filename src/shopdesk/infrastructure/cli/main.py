import logging

import click
from dotenv import load_dotenv

from shopdesk.domain.exceptions import DomainException
from shopdesk.infrastructure.cli.order_commands import (
    order_advance,
    order_availability,
    order_list,
    order_served,
    order_watch,
)
from shopdesk.infrastructure.config import load_settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """shopdesk — storefront order desk"""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [shopdesk] %(levelname)s %(message)s",
    )
    try:
        ctx.obj = load_settings()
    except DomainException as exc:
        raise click.ClickException(str(exc))


@cli.group()
def orders() -> None:
    """Watch and work assigned orders."""


# Register subcommands
orders.add_command(order_advance)
orders.add_command(order_availability)
orders.add_command(order_list)
orders.add_command(order_served)
orders.add_command(order_watch)
