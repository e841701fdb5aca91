"""Display-ready views of orders, handed from the query handlers to the CLI.

Amounts and timestamps are already formatted; nothing here refers back
to the domain objects.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the operator."""

    product_id: str
    name: str
    description: str
    quantity: int
    price: str  # formatted, e.g. "₹40"
    availability: str
    action: str | None  # e.g. "Mark as Unavailable"


@dataclass(frozen=True)
class OrderDTO:
    """Output: an assigned order as displayed to the operator."""

    id: str
    customer_name: str
    status: str
    ordered_at: str
    items: list[LineItemDTO]
    total: str  # after the service fee
    next_action: str | None  # e.g. "Mark as Confirmed"


@dataclass(frozen=True)
class ServedOrderDTO:
    """Output: a completed order in the history list."""

    reference: str
    total: str
    payment_status: str
    payment_method: str
    delivered_at: str
    status: str
