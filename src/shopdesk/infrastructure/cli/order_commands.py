"""CLI commands for assigned and served orders."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime
from typing import Callable, TextIO

import click

from shopdesk.application.order_board import OrderBoard
from shopdesk.application.order_workflow import OrderWorkflowManager
from shopdesk.application.show_orders import ShowOrdersHandler
from shopdesk.application.show_served_orders import ShowServedOrdersHandler
from shopdesk.domain.exceptions import AuthenticationError, DomainException
from shopdesk.infrastructure.bootstrap import Desk, desk
from shopdesk.infrastructure.config import Settings

logger = logging.getLogger(__name__)


def _run(coro) -> None:
    """Run *coro* to completion, turning domain errors into CLI errors."""
    try:
        asyncio.run(coro)
    except AuthenticationError as exc:
        raise click.ClickException(f"{exc}. Reauthentication required.")
    except DomainException as exc:
        raise click.ClickException(str(exc))


async def _load_board(session: Desk) -> None:
    """Fill the board with one authoritative fetch, without touching the alarm."""
    session.board.replace(await session.source.fetch_assigned_orders())


def _acknowledge_on_enter(
    stream: TextIO, workflow: OrderWorkflowManager
) -> Callable[[], None]:
    """Silence the alarm whenever a line is read from *stream*.

    Returns a callable that stops listening.  Streams without a selectable
    file descriptor (pipes on Windows, captured stdin) are ignored.
    """
    loop = asyncio.get_running_loop()
    pending: set[asyncio.Task] = set()

    def on_ready() -> None:
        if not stream.readline():
            loop.remove_reader(fd)
            return
        task = loop.create_task(workflow.acknowledge_alarm())
        pending.add(task)
        task.add_done_callback(pending.discard)

    try:
        fd = stream.fileno()
        loop.add_reader(fd, on_ready)
    except (OSError, ValueError, NotImplementedError) as exc:
        logger.debug("Alarm acknowledgement from stdin unavailable: %s", exc)
        return lambda: None

    def detach() -> None:
        loop.remove_reader(fd)

    return detach


def _display_board(board: OrderBoard) -> None:
    """Shared formatting for the assigned-order list."""
    if board.error:
        click.echo(f"! {board.error}")
    if board.alert_degraded:
        click.echo("! NEW ORDER (alarm sound/vibration unavailable)")

    dtos = ShowOrdersHandler().handle(board.snapshot)
    if not dtos:
        click.echo("No assigned orders")
        return

    for dto in dtos:
        click.echo(f"Order {dto.id}  [{dto.status}]")
        click.echo(f"Customer: {dto.customer_name}")
        click.echo(f"Ordered:  {dto.ordered_at}")
        click.echo()
        click.echo(
            f"  {'Product ID':<14} {'Product':<24} {'Qty':>5} {'Price':>10}  {'Availability':<12}"
        )
        click.echo(f"  {'-'*70}")
        for item in dto.items:
            click.echo(
                f"  {item.product_id:<14} {item.name:<24} {item.quantity:>5} "
                f"{item.price:>10}  {item.availability:<12}"
            )
            if item.description:
                click.echo(f"    {item.description}")
            if item.action:
                flag = "--available" if item.action == "Mark as Available" else "--unavailable"
                click.echo(
                    f"    {item.action}: shopdesk orders availability "
                    f"--id {dto.id} --product {item.product_id} {flag}"
                )
        click.echo(f"  {'-'*70}")
        click.echo(f"  {'Total':<45} {dto.total:>10}")
        if dto.next_action:
            click.echo(f"  Next: {dto.next_action}")
        click.echo()


@click.command("list")
@click.pass_obj
def order_list(settings: Settings) -> None:
    """Show the orders currently assigned to this shop."""

    async def main() -> None:
        session = desk(settings)
        async with session.source:
            await _load_board(session)
        _display_board(session.board)

    _run(main())


@click.command("watch")
@click.pass_obj
def order_watch(settings: Settings) -> None:
    """Poll assigned orders and sound the alarm for new ones.

    Press Enter to silence the alarm; Ctrl-C quits.
    """

    def on_publish(board: OrderBoard) -> None:
        click.echo(f"--- {datetime.now():%H:%M:%S} ---")
        _display_board(board)

    async def main() -> None:
        session = desk(settings)
        session.board.subscribe(on_publish)
        async with session.source:
            async with session.alerts:
                async with session.sync:
                    click.echo(
                        "Watching orders. Press Enter to silence the alarm, Ctrl-C to quit."
                    )
                    detach = _acknowledge_on_enter(sys.stdin, session.workflow)
                    try:
                        await session.sync.wait()
                    finally:
                        detach()

    try:
        _run(main())
    except KeyboardInterrupt:
        click.echo("Stopped.")


@click.command("advance")
@click.option("--id", "order_id", required=True, help="Order ID to move to its next status.")
@click.pass_obj
def order_advance(settings: Settings, order_id: str) -> None:
    """Confirm an assigned order, or mark a confirmed order ready to collect."""

    async def main() -> None:
        session = desk(settings)
        async with session.source:
            await _load_board(session)
            updated = await session.workflow.advance_status(order_id)
        if updated is None:
            order = session.board.snapshot.get(order_id)
            raise click.ClickException(
                f"Order {order_id} is '{order.status}'; nothing to advance."
            )
        click.echo(f"Order {order_id} is now '{updated.status}'.")

    _run(main())


@click.command("availability")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--product", "product_id", required=True, help="Product ID within the order.")
@click.option(
    "--available/--unavailable", required=True, help="Mark the product available or not."
)
@click.pass_obj
def order_availability(
    settings: Settings, order_id: str, product_id: str, available: bool
) -> None:
    """Mark one product of an order as available or unavailable."""

    async def main() -> None:
        session = desk(settings)
        async with session.source:
            await _load_board(session)
            await session.workflow.set_item_availability(order_id, product_id, available)
        click.echo(
            f"Marked product {product_id} as {'Available' if available else 'Unavailable'}."
        )

    _run(main())


@click.command("served")
@click.pass_obj
def order_served(settings: Settings) -> None:
    """Show completed orders."""

    async def main() -> None:
        session = desk(settings)
        async with session.source:
            dtos = await ShowServedOrdersHandler(session.source).handle()
        if not dtos:
            click.echo("No orders have been delivered yet.")
            return
        click.echo(
            f"  {'Order':<8} {'Total':>10}  {'Payment':<8} {'Method':<8} {'Delivered At':<22} Status"
        )
        click.echo(f"  {'-'*72}")
        for dto in dtos:
            click.echo(
                f"  {dto.reference:<8} {dto.total:>10}  {dto.payment_status:<8} "
                f"{dto.payment_method:<8} {dto.delivered_at:<22} {dto.status}"
            )

    _run(main())
