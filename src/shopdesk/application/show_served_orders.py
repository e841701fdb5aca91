"""Application service: Show Served Orders use case (query)."""

from __future__ import annotations

from datetime import datetime, timezone

from shopdesk.application.dto import ServedOrderDTO
from shopdesk.domain.model.served_order import ServedOrder
from shopdesk.domain.port.order_source import OrderSource


def format_delivered_at(moment: datetime | None) -> str:
    """Render as e.g. '05 Mar 2025, 2:07 PM' (UTC)."""
    if moment is None:
        return "-"
    moment = moment.astimezone(timezone.utc)
    hour = moment.strftime("%I").lstrip("0") or "12"
    return f"{moment:%d %b %Y}, {hour}:{moment:%M} {moment:%p}"


class ShowServedOrdersHandler:

    def __init__(self, source: OrderSource) -> None:
        self._source = source

    async def handle(self) -> list[ServedOrderDTO]:
        orders = await self._source.fetch_served_orders()
        return [self._to_dto(order) for order in orders]

    @staticmethod
    def _to_dto(order: ServedOrder) -> ServedOrderDTO:
        return ServedOrderDTO(
            reference=order.reference,
            total=str(order.total_amount),
            payment_status=order.payment_status.upper(),
            payment_method=order.payment_method.upper(),
            delivered_at=format_delivered_at(order.delivered_at),
            status=order.status,
        )
