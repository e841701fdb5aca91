"""Tests for the order list and served-order queries."""

import asyncio
from datetime import datetime, timezone

from shopdesk.application.show_orders import ShowOrdersHandler
from shopdesk.application.show_served_orders import (
    ShowServedOrdersHandler,
    format_delivered_at,
)
from shopdesk.domain.model.order import Availability
from shopdesk.domain.model.served_order import ServedOrder
from shopdesk.domain.model.snapshot import OrderSnapshot
from shopdesk.domain.model.value_objects import Money
from tests.fakes import FakeOrderSource, make_item, make_order


class TestShowOrders:

    def test_dto_fields(self):
        order = make_order(
            "A",
            "Assigned",
            total="100",
            items=(make_item("p1", availability=Availability.AVAILABLE),),
        )

        [dto] = ShowOrdersHandler().handle(OrderSnapshot.of([order]))

        assert dto.total == "₹78"
        assert dto.next_action == "Mark as Confirmed"
        assert dto.ordered_at == "2025-03-05 09:00 UTC"
        assert dto.items[0].price == "₹30"
        assert dto.items[0].action == "Mark as Unavailable"

    def test_no_actions_for_finished_order_and_unknown_item(self):
        order = make_order("A", "Ready to Collect", total="10")

        [dto] = ShowOrdersHandler().handle(OrderSnapshot.of([order]))

        assert dto.next_action is None
        assert dto.items[0].action is None
        assert dto.total == "₹0"

    def test_newest_first(self):
        snapshot = OrderSnapshot.of([make_order("old"), make_order("new", minutes=1)])
        assert [d.id for d in ShowOrdersHandler().handle(snapshot)] == ["new", "old"]


class TestShowServedOrders:

    def test_maps_served_orders(self):
        source = FakeOrderSource()
        source.served = [
            ServedOrder(
                id="65f1c0ffee00aa11bb22cc",
                total_amount=Money.of(250),
                payment_status="Paid",
                payment_method="cod",
                status="Delivered",
                delivered_at=datetime(2025, 3, 5, 14, 7, tzinfo=timezone.utc),
            )
        ]

        [dto] = asyncio.run(ShowServedOrdersHandler(source).handle())

        assert dto.reference == "BB22CC"
        assert dto.payment_status == "PAID"
        assert dto.payment_method == "COD"
        assert dto.delivered_at == "05 Mar 2025, 2:07 PM"

    def test_missing_delivery_time(self):
        assert format_delivered_at(None) == "-"

    def test_midnight_renders_as_twelve(self):
        moment = datetime(2025, 1, 1, 0, 5, tzinfo=timezone.utc)
        assert format_delivered_at(moment) == "01 Jan 2025, 12:05 AM"
