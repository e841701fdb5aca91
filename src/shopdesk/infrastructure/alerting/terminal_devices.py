"""Alert devices for a terminal session.

The desk runs on a workstation rather than a phone: the alarm sound is the
terminal bell rung on a loop, and vibration is recorded in the log only.
Permissions come from configuration instead of a platform prompt.
"""

from __future__ import annotations

import asyncio
import logging

import click

from shopdesk.domain.exceptions import AlertDeviceError
from shopdesk.domain.port.alert_devices import (
    Modality,
    PermissionGate,
    SoundPlayer,
    Vibrator,
)

logger = logging.getLogger(__name__)


class ConfiguredPermissions(PermissionGate):

    def __init__(self, granted: set[Modality] | frozenset[Modality]) -> None:
        self._granted = frozenset(granted)

    async def request(self, modality: Modality) -> bool:
        return modality in self._granted


class TerminalBellPlayer(SoundPlayer):
    """Rings the terminal bell every ``period`` seconds until stopped."""

    def __init__(self, period: float = 1.5) -> None:
        self._period = period
        self._task: asyncio.Task | None = None

    def play_loop(self) -> None:
        if self._task is not None and not self._task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as exc:
            raise AlertDeviceError("Terminal bell needs a running event loop") from exc
        self._task = loop.create_task(self._ring())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _ring(self) -> None:
        while True:
            click.echo("\a", nl=False, err=True)
            await asyncio.sleep(self._period)


class LoggingVibrator(Vibrator):

    def __init__(self) -> None:
        self.active = False

    def vibrate(self, pattern: tuple[int, ...], repeat: bool) -> None:
        self.active = True
        logger.info(
            "Vibration pattern %s%s", list(pattern), " (repeating)" if repeat else ""
        )

    def cancel(self) -> None:
        if self.active:
            logger.info("Vibration cancelled")
        self.active = False
