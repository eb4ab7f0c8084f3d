"""Playback snapshot data model."""

from __future__ import annotations

from dataclasses import dataclass

EMPTY_TIME = "0:00"


@dataclass(frozen=True, slots=True)
class PlaybackSnapshot:
    """Typed view of the player state at one point in time."""

    name: str = ""
    artist: str = ""
    album: str = ""
    duration: int = 0
    formatted_duration: str = EMPTY_TIME
    progress: int = 0
    formatted_progress: str = EMPTY_TIME
    is_playing: bool = False
    is_muted: bool = False
    volume: int = 0

    @classmethod
    def empty(cls) -> PlaybackSnapshot:
        """Snapshot used when no track is loaded."""
        return cls()

    @property
    def has_track(self) -> bool:
        """True when the snapshot describes a loaded track."""
        return bool(self.name)
