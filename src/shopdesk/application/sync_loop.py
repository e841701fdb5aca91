"""Application service: periodic order synchronization.

A ticker fires every ``interval`` seconds and launches one sync cycle.
A tick that finds the previous cycle still running is dropped, not
queued, so at most one fetch is ever in flight.

Each successful cycle installs the server's snapshot on the order board
and drives the alarm:

* a qualifying ("assigned") order id the board has not seen before
  starts the alarm (edge-triggered);
* no qualifying orders at all stops it (level-triggered).

If teardown lands while the alarm is starting, the alarm is stopped again
and the snapshot is discarded.

Network and server failures only raise the board's error banner.  An
authentication failure ends the session: polling stops, the alarm is
silenced, and ``wait()`` re-raises the error.

``stop()`` (or leaving ``async with``) cancels the ticker and any
in-flight cycle and always silences the alarm.  A fetch that completes
after cancellation is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from shopdesk.application.order_board import OrderBoard
from shopdesk.domain.exceptions import AuthenticationError, NetworkError, ServerError
from shopdesk.domain.port.order_source import OrderSource
from shopdesk.domain.service.alert_controller import AlertController

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0


class CycleOutcome(Enum):
    APPLIED = "applied"
    FAILED = "failed"
    SKIPPED = "skipped"
    DISCARDED = "discarded"
    AUTH_FAILED = "auth_failed"


class SyncLoop:

    def __init__(
        self,
        source: OrderSource,
        alerts: AlertController,
        board: OrderBoard,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self._source = source
        self._alerts = alerts
        self._board = board
        self._interval = interval
        self._ticker: asyncio.Task | None = None
        self._cycle: asyncio.Task | None = None
        self._in_flight = False
        self._cancelled = False
        self._finished = asyncio.Event()
        self._auth_error: AuthenticationError | None = None
        self.skipped_ticks = 0

    @property
    def running(self) -> bool:
        return self._ticker is not None and not self._cancelled

    @property
    def in_flight(self) -> bool:
        return self._in_flight or (self._cycle is not None and not self._cycle.done())

    # --- Lifecycle ------------------------------------------------------------

    def start(self) -> None:
        """Begin ticking.  Must be called from within the running event loop."""
        if self._ticker is not None:
            return
        self._cancelled = False
        self._auth_error = None
        self._finished.clear()
        self._ticker = asyncio.create_task(self._tick_forever())
        logger.info("Order sync started (every %.1fs)", self._interval)

    async def stop(self) -> None:
        """Cancel ticking and any in-flight cycle, then silence the alarm."""
        self._cancelled = True
        current = asyncio.current_task()
        pending = [
            task
            for task in (self._ticker, self._cycle)
            if task is not None and task is not current and not task.done()
        ]
        for task in pending:
            task.cancel()
        try:
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        finally:
            self._ticker = None
            self._cycle = None
            await self._alerts.stop()
            self._finished.set()
            logger.info("Order sync stopped")

    async def wait(self) -> None:
        """Block until the loop is stopped; re-raise a session-ending error."""
        await self._finished.wait()
        if self._auth_error is not None:
            raise self._auth_error

    async def __aenter__(self) -> SyncLoop:
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    # --- Ticking --------------------------------------------------------------

    async def _tick_forever(self) -> None:
        while not self._cancelled:
            self.tick()
            await asyncio.sleep(self._interval)

    def tick(self) -> bool:
        """Launch a cycle unless one is already running.  Returns True if launched."""
        if self._cancelled:
            return False
        if self.in_flight:
            self.skipped_ticks += 1
            logger.debug("Previous sync still in flight; tick skipped")
            return False
        self._cycle = asyncio.create_task(self.run_cycle())
        self._cycle.add_done_callback(self._on_cycle_done)
        return True

    @staticmethod
    def _on_cycle_done(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Order sync cycle crashed", exc_info=exc)

    # --- One cycle ------------------------------------------------------------

    async def run_cycle(self) -> CycleOutcome:
        if self._cancelled or self._in_flight:
            return CycleOutcome.SKIPPED
        self._in_flight = True
        try:
            return await self._sync_once()
        finally:
            self._in_flight = False

    async def _sync_once(self) -> CycleOutcome:
        try:
            snapshot = await self._source.fetch_assigned_orders()
        except AuthenticationError as exc:
            await self._end_session(exc)
            return CycleOutcome.AUTH_FAILED
        except (NetworkError, ServerError) as exc:
            if self._cancelled:
                return CycleOutcome.DISCARDED
            logger.warning("Order sync failed: %s", exc)
            self._board.report_error(f"Failed to fetch orders: {exc}")
            return CycleOutcome.FAILED

        if self._cancelled:
            logger.debug("Sync result arrived after cancellation; discarded")
            return CycleOutcome.DISCARDED

        qualifying = snapshot.qualifying_ids
        new_ids = qualifying - self._board.seen_ids
        if new_ids:
            logger.info("New assigned order(s): %s", ", ".join(sorted(new_ids)))
            await self._alerts.start()
        if not qualifying:
            await self._alerts.stop()

        if self._cancelled:
            # Teardown ran while the alarm was starting.
            await self._alerts.stop()
            return CycleOutcome.DISCARDED
        self._board.replace(snapshot, alert_degraded=self._alerts.degraded)
        logger.debug("Synced %d order(s), %d assigned", len(snapshot), len(qualifying))
        return CycleOutcome.APPLIED

    async def _end_session(self, exc: AuthenticationError) -> None:
        logger.error("Session rejected by server, polling stopped: %s", exc)
        self._auth_error = exc
        self._cancelled = True
        ticker, self._ticker = self._ticker, None
        if ticker is not None and ticker is not asyncio.current_task():
            ticker.cancel()
        await self._alerts.stop()
        self._board.require_reauthentication(str(exc))
        self._finished.set()
