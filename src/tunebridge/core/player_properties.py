"""Canonical automation-object property names, commands and template files.

Single source of truth for the expressions the presentation layer sends
through the bridge. Import these constants instead of hard-coding strings.
"""

from __future__ import annotations

# Template file names (must match files in services/host/scripts/)
PROBE_TEMPLATE: str = "probe.ps1"
COMMAND_TEMPLATE: str = "command.ps1"
BATCH_PROBE_TEMPLATE: str = "batch_probe.ps1"

# Placeholder replaced by the rendered expression text
TEMPLATE_PLACEHOLDER: str = "[INPUT]"

# Readable properties
CURRENT_TRACK: str = "CurrentTrack"
TRACK_NAME: str = "CurrentTrack.Name"
TRACK_ARTIST: str = "CurrentTrack.Artist"
TRACK_ALBUM: str = "CurrentTrack.Album"
TRACK_DURATION: str = "CurrentTrack.Duration"
PLAYER_POSITION: str = "PlayerPosition"
PLAYER_STATE: str = "PlayerState"
SOUND_VOLUME: str = "SoundVolume"
MUTE: str = "Mute"

# Properties read together for one playback snapshot, in batch order
SNAPSHOT_PROPERTIES: tuple[str, ...] = (
    PLAYER_POSITION,
    TRACK_NAME,
    TRACK_ALBUM,
    TRACK_ARTIST,
    TRACK_DURATION,
    PLAYER_STATE,
    MUTE,
    SOUND_VOLUME,
)

# Player state value reported while playing
PLAYER_STATE_PLAYING: str = "1"

# Commands
PLAY: str = "Play()"
PAUSE: str = "Pause()"
NEXT_TRACK: str = "NextTrack()"
PREVIOUS_TRACK: str = "PreviousTrack()"

# Assignment commands
SET_VOLUME_FORMAT: str = SOUND_VOLUME + " = {volume}"
MUTE_ON: str = MUTE + " = $True"
MUTE_OFF: str = MUTE + " = $False"

MIN_VOLUME: int = 0
MAX_VOLUME: int = 100
