"""Order aggregate as seen by the shop operator.

Orders arrive from the server with a free-form status string.  The shop
side of the workflow is a short forward-only chain:

    assigned -> confirmed -> ready to collect

Everything after that (delivery, cancellation) is decided server-side.
Orders and line items are immutable; every change produces a new value.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum

from shopdesk.domain.exceptions import EntityNotFoundError
from shopdesk.domain.model.value_objects import Money


def normalize_status(status: str) -> str:
    return status.strip().lower()


class OrderStatus(Enum):
    """Statuses the shop can act on, keyed by their normalized form."""

    ASSIGNED = "assigned"
    CONFIRMED = "confirmed"
    READY_TO_COLLECT = "ready to collect"

    @property
    def label(self) -> str:
        """Spelling the server expects in a status update."""
        return _LABELS[self]

    @staticmethod
    def parse(raw: str) -> OrderStatus | None:
        try:
            return OrderStatus(normalize_status(raw))
        except ValueError:
            return None


_LABELS = {
    OrderStatus.ASSIGNED: "Assigned",
    OrderStatus.CONFIRMED: "Confirmed",
    OrderStatus.READY_TO_COLLECT: "Ready to Collect",
}

_NEXT_STATUS = {
    OrderStatus.ASSIGNED: OrderStatus.CONFIRMED,
    OrderStatus.CONFIRMED: OrderStatus.READY_TO_COLLECT,
}


class Availability(Enum):
    UNKNOWN = "unknown"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @staticmethod
    def from_flag(flag: bool | None) -> Availability:
        if flag is None:
            return Availability.UNKNOWN
        return Availability.AVAILABLE if flag else Availability.UNAVAILABLE


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
SERVICE_FEE = Money(Decimal("22"))


def displayed_total(total: Money, service_fee: Money = SERVICE_FEE) -> Money:
    """Amount shown to the shop: the order total less the platform fee, never negative."""
    return total.minus_floored(service_fee)


@dataclass(frozen=True)
class LineItem:
    product_id: str
    name: str
    quantity: int
    unit_price: Money
    description: str = ""
    availability: Availability = Availability.UNKNOWN

    @property
    def offered_availability(self) -> bool | None:
        """The availability flag an operator may switch this item to.

        Items the server has not flagged either way offer no action.
        """
        if self.availability is Availability.AVAILABLE:
            return False
        if self.availability is Availability.UNAVAILABLE:
            return True
        return None

    def with_availability(self, available: bool) -> LineItem:
        return replace(self, availability=Availability.from_flag(available))


@dataclass(frozen=True)
class Order:
    """An order assigned to this shop.

    ``status`` keeps the server's spelling; comparisons always go through
    ``normalize_status`` so "Assigned " and "assigned" are the same state.
    """

    id: str
    customer_name: str
    created_at: datetime
    status: str
    total_amount: Money
    items: tuple[LineItem, ...] = ()

    # --- Workflow -------------------------------------------------------------

    @property
    def normalized_status(self) -> str:
        return normalize_status(self.status)

    @property
    def is_qualifying(self) -> bool:
        """True while the order is waiting for the shop to pick it up."""
        return self.normalized_status == OrderStatus.ASSIGNED.value

    def next_status(self) -> OrderStatus | None:
        """The status the shop may move this order to, or None if not actionable."""
        current = OrderStatus.parse(self.status)
        if current is None:
            return None
        return _NEXT_STATUS.get(current)

    def with_status(self, status: str) -> Order:
        return replace(self, status=status)

    def with_item_availability(self, product_id: str, available: bool) -> Order:
        """Return a copy with only *product_id*'s availability changed."""
        self.find_item(product_id)
        items = tuple(
            item.with_availability(available) if item.product_id == product_id else item
            for item in self.items
        )
        return replace(self, items=items)

    # --- Computed properties --------------------------------------------------

    @property
    def displayed_total(self) -> Money:
        return displayed_total(self.total_amount)

    # --- Lookups --------------------------------------------------------------

    def find_item(self, product_id: str) -> LineItem:
        for item in self.items:
            if item.product_id == product_id:
                return item
        raise EntityNotFoundError(
            f"Product '{product_id}' not found in order {self.id}"
        )
