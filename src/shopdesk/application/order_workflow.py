"""Application service: operator commands on assigned orders.

Commands are submitted to the order source first; only after the server
acknowledges them is the order board updated, and then optimistically:
the next sync overwrites the change with server truth.  A rejected
command leaves the board's snapshot as it was, raises the board's error
banner, and re-raises to the caller.
"""

from __future__ import annotations

import logging

from shopdesk.application.order_board import OrderBoard
from shopdesk.domain.exceptions import EntityNotFoundError, OrderSourceError
from shopdesk.domain.model.order import Order
from shopdesk.domain.port.order_source import OrderSource
from shopdesk.domain.service.alert_controller import AlertController

logger = logging.getLogger(__name__)


class OrderWorkflowManager:

    def __init__(
        self,
        source: OrderSource,
        board: OrderBoard,
        alerts: AlertController | None = None,
    ) -> None:
        self._source = source
        self._board = board
        self._alerts = alerts

    async def advance_status(self, order_id: str) -> Order | None:
        """Move an order one step along assigned -> confirmed -> ready to collect.

        Returns the updated order, or None when the order's current status
        offers no next step.
        """
        order = self._require_order(order_id)
        target = order.next_status()
        if target is None:
            logger.info(
                "Order %s has status %r; no transition available", order_id, order.status
            )
            return None

        try:
            await self._source.update_order_status(order_id, target.label)
        except OrderSourceError as exc:
            logger.warning("Status update for order %s failed: %s", order_id, exc)
            self._board.report_error(f"Failed to update order status: {exc}")
            raise

        # Re-read: a sync may have replaced the snapshot while we awaited.
        current = self._board.snapshot.get(order_id) or order
        updated = current.with_status(target.label)
        self._board.apply(self._board.snapshot.with_order(updated))
        logger.info("Order %s -> %s", order_id, target.label)

        if self._alerts is not None and not self._board.snapshot.has_qualifying:
            await self._alerts.stop()
            self._board.set_alert_degraded(False)
        return updated

    async def set_item_availability(
        self, order_id: str, product_id: str, available: bool
    ) -> Order:
        """Mark one line item available or unavailable."""
        order = self._require_order(order_id)
        order.find_item(product_id)

        try:
            await self._source.set_item_availability(order_id, product_id, available)
        except OrderSourceError as exc:
            logger.warning(
                "Availability update for %s/%s failed: %s", order_id, product_id, exc
            )
            self._board.report_error(f"Could not update product availability: {exc}")
            raise

        current = self._board.snapshot.get(order_id) or order
        try:
            updated = current.with_item_availability(product_id, available)
        except EntityNotFoundError:
            # The item vanished in a sync that landed meanwhile; server truth wins.
            return current
        self._board.apply(self._board.snapshot.with_order(updated))
        logger.info(
            "Order %s: product %s marked %s",
            order_id,
            product_id,
            "available" if available else "unavailable",
        )
        return updated

    async def acknowledge_alarm(self) -> None:
        """Silence the alarm until another new order arrives."""
        if self._alerts is None:
            return
        await self._alerts.stop()
        self._board.set_alert_degraded(False)

    def _require_order(self, order_id: str) -> Order:
        order = self._board.snapshot.get(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} is not among the assigned orders")
        return order
