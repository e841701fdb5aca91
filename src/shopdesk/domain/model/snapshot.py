"""Order snapshot: the full list of orders assigned to the shop at one moment.

A snapshot is a value.  The sync loop swaps in a new one every cycle and
workflow commands derive modified copies; nothing mutates a snapshot in
place.  Orders are always held newest-first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from shopdesk.domain.model.order import Order


@dataclass(frozen=True)
class OrderSnapshot:

    orders: tuple[Order, ...] = ()

    def __post_init__(self) -> None:
        # sorted() is stable with reverse=True, so equal timestamps keep
        # the order the server returned them in.
        ordered = tuple(sorted(self.orders, key=lambda o: o.created_at, reverse=True))
        object.__setattr__(self, "orders", ordered)

    @staticmethod
    def of(orders: Iterable[Order]) -> OrderSnapshot:
        return OrderSnapshot(tuple(orders))

    # --- Queries --------------------------------------------------------------

    def __iter__(self) -> Iterator[Order]:
        return iter(self.orders)

    def __len__(self) -> int:
        return len(self.orders)

    def get(self, order_id: str) -> Order | None:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(o.id for o in self.orders)

    @property
    def qualifying_ids(self) -> frozenset[str]:
        """Ids of orders still waiting for the shop (status "assigned")."""
        return frozenset(o.id for o in self.orders if o.is_qualifying)

    @property
    def has_qualifying(self) -> bool:
        return any(o.is_qualifying for o in self.orders)

    # --- Derivations ----------------------------------------------------------

    def with_order(self, order: Order) -> OrderSnapshot:
        """Return a snapshot with *order* swapped in for the order with the same id.

        If the id is no longer tracked the snapshot is returned unchanged.
        """
        if self.get(order.id) is None:
            return self
        return OrderSnapshot(
            tuple(order if o.id == order.id else o for o in self.orders)
        )
