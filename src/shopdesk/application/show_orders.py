"""Application service: Show Orders use case (query)."""

from __future__ import annotations

from datetime import timezone

from shopdesk.application.dto import LineItemDTO, OrderDTO
from shopdesk.domain.model.order import LineItem, Order
from shopdesk.domain.model.snapshot import OrderSnapshot


class ShowOrdersHandler:

    def handle(self, snapshot: OrderSnapshot) -> list[OrderDTO]:
        return [self._to_dto(order) for order in snapshot]

    def _to_dto(self, order: Order) -> OrderDTO:
        target = order.next_status()
        return OrderDTO(
            id=order.id,
            customer_name=order.customer_name,
            status=order.status,
            ordered_at=order.created_at.astimezone(timezone.utc).strftime(
                "%Y-%m-%d %H:%M UTC"
            ),
            items=[self._item_to_dto(item) for item in order.items],
            total=str(order.displayed_total),
            next_action=f"Mark as {target.label}" if target is not None else None,
        )

    @staticmethod
    def _item_to_dto(item: LineItem) -> LineItemDTO:
        offered = item.offered_availability
        if offered is None:
            action = None
        else:
            action = "Mark as Available" if offered else "Mark as Unavailable"
        return LineItemDTO(
            product_id=item.product_id,
            name=item.name,
            description=item.description,
            quantity=item.quantity,
            price=str(item.unit_price),
            availability=item.availability.value,
            action=action,
        )
