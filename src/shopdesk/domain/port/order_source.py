"""Abstract port for the remote order source."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopdesk.domain.model.served_order import ServedOrder
from shopdesk.domain.model.snapshot import OrderSnapshot


class OrderSource(ABC):
    """Request/response access to the shop's orders.

    Implementations hold no order state and never retry.  Failures are
    reported as ``NetworkError``, ``ServerError`` or ``AuthenticationError``.
    """

    @abstractmethod
    async def fetch_assigned_orders(self) -> OrderSnapshot:
        """Return every order currently assigned to this shop."""

    @abstractmethod
    async def update_order_status(self, order_id: str, new_status: str) -> None:
        """Ask the server to move *order_id* to *new_status*."""

    @abstractmethod
    async def set_item_availability(
        self, order_id: str, product_id: str, available: bool
    ) -> None:
        """Flag one line item of *order_id* as available or unavailable."""

    @abstractmethod
    async def fetch_served_orders(self) -> list[ServedOrder]:
        """Return the shop's completed orders."""

    async def close(self) -> None:
        """Release transport resources; the default holds none."""

    async def __aenter__(self) -> OrderSource:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
