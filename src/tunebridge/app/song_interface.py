"""Current-track information built from one batch probe."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tunebridge.app.conversions import coerce_bool, coerce_int, coerce_player_state, format_minutes_seconds
from tunebridge.core.models.playback import PlaybackSnapshot
from tunebridge.core.player_properties import (
    MUTE,
    PLAYER_POSITION,
    PLAYER_STATE,
    SNAPSHOT_PROPERTIES,
    SOUND_VOLUME,
    TRACK_ALBUM,
    TRACK_ARTIST,
    TRACK_DURATION,
    TRACK_NAME,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tunebridge.core.models.protocols import PropertyBridgeProtocol


def build_snapshot(values: Mapping[str, str]) -> PlaybackSnapshot:
    """Coerce raw batch values into a PlaybackSnapshot.

    Text fields are trimmed of surrounding whitespace and line terminators.

    Raises:
        PropertyCoercionError: If a numeric or boolean field is malformed

    """
    duration = coerce_int(values[TRACK_DURATION], TRACK_DURATION)
    progress = coerce_int(values[PLAYER_POSITION], PLAYER_POSITION)

    return PlaybackSnapshot(
        name=values[TRACK_NAME].strip(),
        artist=values[TRACK_ARTIST].strip(),
        album=values[TRACK_ALBUM].strip(),
        duration=duration,
        formatted_duration=format_minutes_seconds(duration),
        progress=progress,
        formatted_progress=format_minutes_seconds(progress),
        is_playing=coerce_player_state(values[PLAYER_STATE]),
        is_muted=coerce_bool(values[MUTE], MUTE),
        volume=coerce_int(values[SOUND_VOLUME], SOUND_VOLUME),
    )


class SongInterface:
    """Reads the currently loaded track as a typed snapshot."""

    def __init__(self, bridge: PropertyBridgeProtocol, console_logger: logging.Logger | None = None) -> None:
        self.bridge = bridge
        self.console_logger = console_logger if console_logger is not None else logging.getLogger(__name__)

    async def get_song_info(self) -> PlaybackSnapshot:
        """Return the current snapshot, or ``PlaybackSnapshot.empty()`` when no track is loaded.

        Raises:
            PropertyCoercionError: If the player reports a malformed value
            MisalignedBatchResponseError: If the batch output cannot be attributed
            HostScriptError: If the scripting host fails

        """
        session = await self.bridge.current_session()
        if session is None:
            return PlaybackSnapshot.empty()

        values = await session.read_properties(SNAPSHOT_PROPERTIES)
        snapshot = build_snapshot(values)
        self.console_logger.debug("Snapshot: %s by %s (%s / %s)", snapshot.name, snapshot.artist, snapshot.formatted_progress, snapshot.formatted_duration)
        return snapshot

    @staticmethod
    def format_m_s(seconds: int) -> str:
        """Format seconds as minutes and zero-padded seconds."""
        return format_minutes_seconds(seconds)
