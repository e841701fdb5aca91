"""Served (completed) orders: a read-only history kept by the server."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from shopdesk.domain.model.value_objects import Money


@dataclass(frozen=True)
class ServedOrder:

    id: str
    total_amount: Money
    payment_status: str
    payment_method: str
    status: str
    delivered_at: datetime | None = None

    @property
    def reference(self) -> str:
        """Short reference shown to staff: last six characters of the id."""
        return self.id[-6:].upper()
