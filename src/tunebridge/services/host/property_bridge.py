"""Property Bridge Module.

Public entry point to the player's automation object. Composes script
templating, host execution and batch parsing into single-property reads,
batched reads and fire-and-forget commands, plus the "track loaded"
readiness gate.

Every call renders a fresh script and spawns exactly one host process; no
call is retried and the bridge keeps no mutable state between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from tunebridge.core.logger import LogFormat
from tunebridge.core.player_properties import CURRENT_TRACK
from tunebridge.services.host.response_parser import MisalignedBatchResponseError, ProbeResponse, parse_batch_response

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tunebridge.core.models.protocols import ScriptExecutorProtocol
    from tunebridge.services.host.script_templates import ScriptTemplates

LOG_PREVIEW_LENGTH = 200


@dataclass(frozen=True, slots=True)
class PlayerSession:
    """Read access that only exists while the player has a track loaded.

    Obtained from ``PropertyBridge.current_session()``; holding one is the
    proof that the readiness check passed.
    """

    bridge: PropertyBridge

    async def read_property(self, expression: str) -> str:
        """Read one property through the owning bridge."""
        return await self.bridge.read_property(expression)

    async def read_properties(self, expressions: Sequence[str]) -> ProbeResponse:
        """Read several properties through the owning bridge in one host invocation."""
        return await self.bridge.read_properties(expressions)


class PropertyBridge:
    """Reads properties from and sends commands to the player automation object.

    Attributes:
        templates: Script templates, loaded once at construction.
        executor: Process executor used for every call.
        readiness_probe: Property whose non-empty value means a track is loaded.

    """

    def __init__(
        self,
        templates: ScriptTemplates,
        executor: ScriptExecutorProtocol,
        console_logger: logging.Logger | None = None,
        error_logger: logging.Logger | None = None,
        *,
        readiness_probe: str = CURRENT_TRACK,
    ) -> None:
        """Initialize the bridge."""
        self.templates = templates
        self.executor = executor
        self.console_logger = console_logger if console_logger is not None else logging.getLogger(__name__)
        self.error_logger = error_logger if error_logger is not None else self.console_logger
        self.readiness_probe = readiness_probe
        self.console_logger.debug("%s ready (readiness probe: %s)", LogFormat.entity(type(self).__name__), readiness_probe)

    async def read_property(self, expression: str) -> str:
        """Read a single property.

        Returns:
            The host's output verbatim, or an empty string when it printed
            nothing. Empty output is never an error; callers decide what an
            empty value means.

        Raises:
            HostSpawnError: Host could not be started
            HostExecutionError: Host reported failure

        """
        script = self.templates.render_probe(expression)
        return await self.executor.execute(script, f"probe {expression}")

    async def read_properties(self, expressions: Sequence[str]) -> ProbeResponse:
        """Read several properties in one host invocation.

        Args:
            expressions: Property expressions; output lines are attributed by position

        Returns:
            ProbeResponse with one entry per expression, in request order.
            An empty request yields an empty response.

        Raises:
            MisalignedBatchResponseError: Output lines do not line up with the request
            HostSpawnError: Host could not be started
            HostExecutionError: Host reported failure

        """
        requested = list(expressions)
        script = self.templates.render_batch_probe(requested)
        raw_output = await self.executor.execute(script, f"batch_probe [{len(requested)}]")

        try:
            return parse_batch_response(raw_output, requested)
        except MisalignedBatchResponseError as e:
            self.error_logger.error(
                "Batch probe for %s misaligned: %s. Output: %s",
                ", ".join(requested),
                e,
                raw_output[:LOG_PREVIEW_LENGTH],
            )
            raise

    async def invoke(self, expression: str) -> None:
        """Execute a command expression for effect.

        Raises:
            HostSpawnError: Host could not be started
            HostExecutionError: Host reported failure; control commands treat this as fatal

        """
        script = self.templates.render_command(expression)
        await self.executor.execute(script, f"command {expression}")
        self.console_logger.info("Sent command %s", LogFormat.entity(expression))

    async def is_track_loaded(self) -> bool:
        """Return True iff the readiness probe prints a non-blank value."""
        current_track = await self.read_property(self.readiness_probe)
        return bool(current_track.strip())

    async def current_session(self) -> PlayerSession | None:
        """Return a PlayerSession while a track is loaded, otherwise None."""
        if not await self.is_track_loaded():
            self.console_logger.debug("No track loaded")
            return None
        return PlayerSession(self)


class DryRunPropertyBridge(PropertyBridge):
    """Bridge that performs reads but records commands instead of executing them."""

    def __init__(
        self,
        templates: ScriptTemplates,
        executor: ScriptExecutorProtocol,
        console_logger: logging.Logger | None = None,
        error_logger: logging.Logger | None = None,
        *,
        readiness_probe: str = CURRENT_TRACK,
    ) -> None:
        """Initialize the dry-run bridge with an empty action log."""
        super().__init__(templates, executor, console_logger, error_logger, readiness_probe=readiness_probe)
        self.actions: list[dict[str, Any]] = []

    async def invoke(self, expression: str) -> None:
        """Record the command and its rendered script without running the host."""
        self.actions.append({"command": expression, "script": self.templates.render_command(expression)})
        self.console_logger.info("DRY-RUN: would send command %s", LogFormat.entity(expression))

    def get_actions(self) -> list[dict[str, Any]]:
        """Return the recorded commands, oldest first."""
        return self.actions
