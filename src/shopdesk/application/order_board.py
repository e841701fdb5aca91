"""The order board: everything the UI layer reads about assigned orders.

The board is written by two parties.  The sync loop replaces the snapshot
(and the set of order ids already alerted for) once per successful cycle.
Workflow commands apply optimistic snapshots between cycles.  Whichever
write lands last wins; the next sync reconciles with the server.

Subscribers are called with the board after every change and must treat
it as read-only.
"""

from __future__ import annotations

import logging
from typing import Callable

from shopdesk.domain.model.snapshot import OrderSnapshot

logger = logging.getLogger(__name__)

Listener = Callable[["OrderBoard"], None]


class OrderBoard:

    def __init__(self) -> None:
        self._snapshot = OrderSnapshot()
        self._seen_ids: frozenset[str] = frozenset()
        self._error: str | None = None
        self._reauth_required = False
        self._alert_degraded = False
        self._listeners: list[Listener] = []

    # --- Read side ------------------------------------------------------------

    @property
    def snapshot(self) -> OrderSnapshot:
        return self._snapshot

    @property
    def seen_ids(self) -> frozenset[str]:
        """Order ids already alerted for, as of the last successful sync."""
        return self._seen_ids

    @property
    def error(self) -> str | None:
        """Transient error banner; cleared by the next successful sync."""
        return self._error

    @property
    def reauth_required(self) -> bool:
        return self._reauth_required

    @property
    def alert_degraded(self) -> bool:
        return self._alert_degraded

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Write side -----------------------------------------------------------

    def replace(self, snapshot: OrderSnapshot, alert_degraded: bool = False) -> None:
        """Install an authoritative snapshot from the server."""
        self._snapshot = snapshot
        self._seen_ids = snapshot.ids
        self._error = None
        self._reauth_required = False
        self._alert_degraded = alert_degraded
        self._publish()

    def apply(self, snapshot: OrderSnapshot) -> None:
        """Install an optimistic snapshot; the seen-id set is left alone."""
        self._snapshot = snapshot
        self._publish()

    def set_alert_degraded(self, degraded: bool) -> None:
        if degraded != self._alert_degraded:
            self._alert_degraded = degraded
            self._publish()

    def report_error(self, message: str) -> None:
        self._error = message
        self._publish()

    def require_reauthentication(self, message: str) -> None:
        self._reauth_required = True
        self._error = message
        self._alert_degraded = False
        self._publish()

    def _publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Order board listener %r failed", listener)
