"""Now-playing summary and a minimal text control loop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable

    from tunebridge.app.player_controls import PlayerControls
    from tunebridge.core.models.playback import PlaybackSnapshot

NOT_LISTENING = "You're not listening to a song!"
QUIT_COMMANDS = frozenset({"quit", "exit"})


def describe_snapshot(snapshot: PlaybackSnapshot) -> str:
    """Render the now-playing summary shown to the user."""
    if not snapshot.has_track:
        return NOT_LISTENING
    return f"You're listening to {snapshot.name}\n  by {snapshot.artist}\n{snapshot.formatted_progress} -- {snapshot.formatted_duration}"


async def _iterate(lines: Iterable[str] | AsyncIterable[str]) -> AsyncIterator[str]:
    if hasattr(lines, "__aiter__"):
        async for line in lines:
            yield line
    else:
        for line in lines:
            yield line


async def run_control_loop(
    controls: PlayerControls,
    lines: Iterable[str] | AsyncIterable[str],
    output: Callable[[str], None] = print,
    logger: logging.Logger | None = None,
) -> int:
    """Drive the player from text commands.

    ``play`` resumes playback, ``quit``/``exit`` stops the loop, blank lines
    are skipped and anything else pauses. Host failures propagate and end
    the loop.

    Returns:
        Number of commands sent to the player.

    """
    log = logger if logger is not None else logging.getLogger(__name__)
    sent = 0

    async for raw_line in _iterate(lines):
        command = raw_line.strip().lower()
        if not command:
            continue
        if command in QUIT_COMMANDS:
            break

        if command == "play":
            await controls.play()
            output("Playing.")
        else:
            await controls.pause()
            output("Paused.")
        sent += 1
        log.debug("Control loop handled %r", command)

    return sent
