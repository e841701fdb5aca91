"""Abstract ports for the devices used to alert the operator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class Modality(Enum):
    SOUND = "sound"
    VIBRATION = "vibration"


class PermissionGate(ABC):

    @abstractmethod
    async def request(self, modality: Modality) -> bool:
        """Ask the platform for permission to use *modality*; True if granted."""


class SoundPlayer(ABC):

    @abstractmethod
    def play_loop(self) -> None:
        """Start the alarm sound, looping until ``stop()``.

        Raises ``AlertDeviceError`` if the sound cannot be loaded.
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop playback and release the sound."""


class Vibrator(ABC):

    @abstractmethod
    def vibrate(self, pattern: tuple[int, ...], repeat: bool) -> None:
        """Run *pattern* (alternating on/off milliseconds), optionally forever."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop any running vibration."""
