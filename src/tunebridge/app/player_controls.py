"""High-level playback controls on top of the property bridge."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tunebridge.app.conversions import coerce_bool, coerce_int, coerce_player_state
from tunebridge.app.song_interface import SongInterface
from tunebridge.core.player_properties import (
    MAX_VOLUME,
    MIN_VOLUME,
    MUTE,
    MUTE_OFF,
    MUTE_ON,
    NEXT_TRACK,
    PAUSE,
    PLAY,
    PLAYER_STATE,
    PREVIOUS_TRACK,
    SET_VOLUME_FORMAT,
    SOUND_VOLUME,
)

if TYPE_CHECKING:
    from tunebridge.core.models.protocols import PropertyBridgeProtocol


def clamp_volume(volume: int) -> int:
    """Clamp *volume* into the player's 0..100 range."""
    return max(MIN_VOLUME, min(MAX_VOLUME, volume))


class PlayerControls:
    """Play/pause, track skipping, volume and mute.

    Every method is one round trip through the bridge (two for relative
    volume changes and mute toggling, which read before they write).
    Host failures propagate unchanged.
    """

    def __init__(self, bridge: PropertyBridgeProtocol, console_logger: logging.Logger | None = None) -> None:
        self.bridge = bridge
        self.console_logger = console_logger if console_logger is not None else logging.getLogger(__name__)
        self.song_interface = SongInterface(bridge, self.console_logger)

    async def get_volume(self) -> int:
        """Return the current volume (0..100)."""
        return coerce_int(await self.bridge.read_property(SOUND_VOLUME), SOUND_VOLUME)

    async def set_volume(self, volume: int) -> None:
        """Set the volume.

        Raises:
            ValueError: If *volume* is outside 0..100

        """
        if not MIN_VOLUME <= volume <= MAX_VOLUME:
            msg = f"volume must be between {MIN_VOLUME} and {MAX_VOLUME}, got {volume}"
            raise ValueError(msg)
        await self.bridge.invoke(SET_VOLUME_FORMAT.format(volume=volume))

    async def increase_volume(self, increase_by: int) -> int:
        """Raise the volume by *increase_by*, clamped at 100. Returns the new volume."""
        new_volume = clamp_volume(await self.get_volume() + increase_by)
        await self.bridge.invoke(SET_VOLUME_FORMAT.format(volume=new_volume))
        return new_volume

    async def decrease_volume(self, decrease_by: int) -> int:
        """Lower the volume by *decrease_by*, clamped at 0. Returns the new volume."""
        return await self.increase_volume(-decrease_by)

    async def play(self) -> None:
        await self.bridge.invoke(PLAY)

    async def pause(self) -> None:
        await self.bridge.invoke(PAUSE)

    async def next_track(self) -> None:
        await self.bridge.invoke(NEXT_TRACK)

    async def previous_track(self) -> None:
        await self.bridge.invoke(PREVIOUS_TRACK)

    async def is_muted(self) -> bool:
        """Return the player's current mute state."""
        return coerce_bool(await self.bridge.read_property(MUTE), MUTE)

    async def toggle_mute(self) -> bool:
        """Flip the mute state, reading it first. Returns the new state."""
        muted = await self.is_muted()
        await self.bridge.invoke(MUTE_OFF if muted else MUTE_ON)
        return not muted

    async def is_playing(self) -> bool:
        """Check if the loaded track is currently playing."""
        return coerce_player_state(await self.bridge.read_property(PLAYER_STATE))
