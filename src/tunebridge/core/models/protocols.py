"""Service Protocol Definitions.

Interfaces between the presentation layer and the property bridge, and
between the bridge and the process executor. Depending on these protocols
instead of concrete classes lets tests substitute fake executors and lets
the dry-run bridge stand in for the real one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@runtime_checkable
class ScriptExecutorProtocol(Protocol):
    """Runs one script in a fresh scripting host process."""

    async def execute(self, script_text: str, label: str = "script") -> str:
        """Run the script and return its standard output verbatim.

        Args:
            script_text: Complete script for the host
            label: Label for logging and error context

        Returns:
            Captured standard output (empty string when the host printed nothing)

        """
        ...


class PropertyReaderProtocol(Protocol):
    """Read access to automation-object properties."""

    async def read_property(self, expression: str) -> str:
        """Read one property; empty string when the host printed nothing."""
        ...

    async def read_properties(self, expressions: Sequence[str]) -> Mapping[str, str]:
        """Read several properties in one host invocation."""
        ...


@runtime_checkable
class PropertyBridgeProtocol(PropertyReaderProtocol, Protocol):
    """Full bridge surface consumed by the presentation layer."""

    async def invoke(self, expression: str) -> None:
        """Execute a command expression for effect."""
        ...

    async def is_track_loaded(self) -> bool:
        """Report whether the player currently has a track loaded."""
        ...

    async def current_session(self) -> PropertyReaderProtocol | None:
        """Return a reader that exists only while a track is loaded."""
        ...
