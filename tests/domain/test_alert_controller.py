"""Unit tests for the alarm state machine."""

import asyncio

import pytest

from shopdesk.domain.exceptions import AlertDeviceError, PermissionDenied
from shopdesk.domain.port.alert_devices import Modality
from shopdesk.domain.service.alert_controller import (
    VIBRATION_PATTERN,
    AlarmState,
    AlertController,
)
from tests.fakes import FakePermissions, FakeSoundPlayer, FakeVibrator


def _controller(granted=None, sound_error=None):
    sound = FakeSoundPlayer(error=sound_error)
    vibrator = FakeVibrator()
    permissions = FakePermissions(granted)
    return AlertController(sound, vibrator, permissions), sound, vibrator, permissions


class TestStart:

    def test_start_engages_sound_and_vibration(self):
        alerts, sound, vibrator, _ = _controller()

        result = asyncio.run(alerts.start())

        assert result is None
        assert alerts.state is AlarmState.SOUNDING
        assert sound.playing
        assert vibrator.patterns == [(VIBRATION_PATTERN, True)]
        assert alerts.engaged == {Modality.SOUND, Modality.VIBRATION}
        assert not alerts.degraded

    def test_start_twice_is_idempotent(self):
        alerts, sound, vibrator, permissions = _controller()

        async def scenario():
            await alerts.start()
            await alerts.start()

        asyncio.run(scenario())

        assert alerts.state is AlarmState.SOUNDING
        assert sound.play_calls == 1
        assert len(vibrator.patterns) == 1
        assert len(permissions.requests) == 2  # one per modality, first start only

    def test_permission_requested_before_engaging(self):
        alerts, sound, _, permissions = _controller(granted=set())

        result = asyncio.run(alerts.start())

        assert permissions.requests == [Modality.SOUND, Modality.VIBRATION]
        assert sound.play_calls == 0
        assert isinstance(result, PermissionDenied)
        assert result.modalities == {Modality.SOUND, Modality.VIBRATION}

    def test_denied_sound_degrades_to_vibration_only(self):
        alerts, sound, vibrator, _ = _controller(granted={Modality.VIBRATION})

        result = asyncio.run(alerts.start())

        assert isinstance(result, PermissionDenied)
        assert result.modalities == {Modality.SOUND}
        assert alerts.is_sounding
        assert alerts.degraded
        assert not sound.playing
        assert vibrator.vibrating

    def test_sound_load_failure_keeps_vibration(self):
        alerts, _, vibrator, _ = _controller(sound_error=AlertDeviceError("no alarm.mp3"))

        result = asyncio.run(alerts.start())

        assert result is None
        assert alerts.is_sounding
        assert alerts.engaged == {Modality.VIBRATION}
        assert vibrator.vibrating


class TestStop:

    def test_stop_releases_devices(self):
        alerts, sound, vibrator, _ = _controller()

        async def scenario():
            await alerts.start()
            await alerts.stop()

        asyncio.run(scenario())

        assert alerts.state is AlarmState.IDLE
        assert not sound.playing
        assert not vibrator.vibrating
        assert alerts.engaged == frozenset()

    def test_stop_when_idle_is_noop(self):
        alerts, sound, vibrator, _ = _controller()

        async def scenario():
            await alerts.stop()
            await alerts.stop()

        asyncio.run(scenario())

        assert alerts.state is AlarmState.IDLE
        assert sound.stop_calls == 0
        assert vibrator.cancel_calls == 0

    def test_stop_only_releases_engaged_devices(self):
        alerts, sound, vibrator, _ = _controller(granted={Modality.VIBRATION})

        async def scenario():
            await alerts.start()
            await alerts.stop()

        asyncio.run(scenario())

        assert sound.stop_calls == 0
        assert vibrator.cancel_calls == 1

    def test_restart_after_stop(self):
        alerts, sound, _, _ = _controller()

        async def scenario():
            await alerts.start()
            await alerts.stop()
            await alerts.start()

        asyncio.run(scenario())

        assert alerts.is_sounding
        assert sound.play_calls == 2

    def test_context_exit_always_stops(self):
        alerts, sound, vibrator, _ = _controller()

        async def scenario():
            async with alerts:
                await alerts.start()
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(scenario())

        assert alerts.state is AlarmState.IDLE
        assert not sound.playing
        assert not vibrator.vibrating
