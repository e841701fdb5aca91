"""Domain service: the new-order alarm.

The alarm is a two-state machine (IDLE / SOUNDING) that owns the sound and
vibration devices while it is sounding.  ``start()`` and ``stop()`` are both
idempotent, so callers can fire them from any path without first checking
the state.  Leaving an ``async with AlertController(...)`` block always
releases the devices.

Permissions are requested per modality before it is engaged.  A refusal
does not raise: the alarm sounds with whatever was granted (possibly
nothing, leaving only the visual indicator) and ``start()`` hands back a
``PermissionDenied`` describing what was refused.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from shopdesk.domain.exceptions import AlertDeviceError, PermissionDenied
from shopdesk.domain.port.alert_devices import (
    Modality,
    PermissionGate,
    SoundPlayer,
    Vibrator,
)

logger = logging.getLogger(__name__)

# Alternating vibrate/pause durations in milliseconds, repeated while sounding.
VIBRATION_PATTERN: tuple[int, ...] = (1000, 500, 1000, 500)


class AlarmState(Enum):
    IDLE = "idle"
    SOUNDING = "sounding"


class AlertController:

    def __init__(
        self,
        sound: SoundPlayer,
        vibrator: Vibrator,
        permissions: PermissionGate,
        pattern: tuple[int, ...] = VIBRATION_PATTERN,
    ) -> None:
        self._sound = sound
        self._vibrator = vibrator
        self._permissions = permissions
        self._pattern = pattern
        self._state = AlarmState.IDLE
        self._engaged: frozenset[Modality] = frozenset()
        self._denied: frozenset[Modality] = frozenset()
        self._lock = asyncio.Lock()

    # --- State ----------------------------------------------------------------

    @property
    def state(self) -> AlarmState:
        return self._state

    @property
    def is_sounding(self) -> bool:
        return self._state is AlarmState.SOUNDING

    @property
    def engaged(self) -> frozenset[Modality]:
        return self._engaged

    @property
    def degraded(self) -> bool:
        """True while sounding without every modality it asked for."""
        return self.is_sounding and bool(self._denied)

    # --- Transitions ----------------------------------------------------------

    async def start(self) -> PermissionDenied | None:
        """IDLE -> SOUNDING.  No-op if already sounding."""
        async with self._lock:
            if self._state is AlarmState.SOUNDING:
                return None

            engaged: set[Modality] = set()
            denied: set[Modality] = set()

            try:
                if await self._permissions.request(Modality.SOUND):
                    try:
                        self._sound.play_loop()
                        engaged.add(Modality.SOUND)
                    except AlertDeviceError as exc:
                        logger.warning("Alarm sound unavailable: %s", exc)
                else:
                    denied.add(Modality.SOUND)

                if await self._permissions.request(Modality.VIBRATION):
                    try:
                        self._vibrator.vibrate(self._pattern, repeat=True)
                        engaged.add(Modality.VIBRATION)
                    except AlertDeviceError as exc:
                        logger.warning("Vibration unavailable: %s", exc)
                else:
                    denied.add(Modality.VIBRATION)
            except BaseException:
                # Cancelled mid-start: nothing may keep sounding while IDLE.
                self._release(engaged)
                raise

            self._engaged = frozenset(engaged)
            self._denied = frozenset(denied)
            self._state = AlarmState.SOUNDING
            logger.info(
                "Alarm sounding (%s)",
                ", ".join(sorted(m.value for m in engaged)) or "visual only",
            )

            if denied:
                signal = PermissionDenied(self._denied)
                logger.warning("%s; alerting degraded", signal)
                return signal
            return None

    async def stop(self) -> None:
        """SOUNDING -> IDLE.  No-op if already idle."""
        async with self._lock:
            if self._state is AlarmState.IDLE:
                return
            try:
                self._release(self._engaged)
            finally:
                self._engaged = frozenset()
                self._denied = frozenset()
                self._state = AlarmState.IDLE
            logger.info("Alarm stopped")

    def _release(self, engaged) -> None:
        try:
            if Modality.SOUND in engaged:
                self._sound.stop()
        finally:
            if Modality.VIBRATION in engaged:
                self._vibrator.cancel()

    # --- Scoped release -------------------------------------------------------

    async def __aenter__(self) -> AlertController:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
