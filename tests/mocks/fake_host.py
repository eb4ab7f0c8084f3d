"""In-memory stand-in for the scripting host.

Interprets the handful of statement shapes the bundled templates produce
against a dictionary of player properties, so bridge behaviour can be tested
end to end without PowerShell or a media player.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from tunebridge.services.host import HostExecutionError

PREAMBLE_PREFIXES = ("$ErrorActionPreference", "[Console]::", "$itunes = New-Object")

_PROBE = re.compile(r"^Write-Output \$itunes\.(?P<expr>.+)$")
_BATCH = re.compile(r"^Write-Output \(\[string\]\$itunes\.(?P<expr>.+)\)$")
_ASSIGN = re.compile(r"^\$itunes\.(?P<prop>[\w.]+) = (?P<value>.+)$")
_METHOD = re.compile(r"^\$itunes\.(?P<method>\w+)\(\)$")

PLAYING_STATE: dict[str, str] = {
    "CurrentTrack": "System.__ComObject",
    "CurrentTrack.Name": "Wish You Were Here",
    "CurrentTrack.Artist": "Pink Floyd",
    "CurrentTrack.Album": "Wish You Were Here",
    "CurrentTrack.Duration": "334",
    "PlayerPosition": "75",
    "PlayerState": "1",
    "Mute": "False",
    "SoundVolume": "60",
}


@dataclass
class HostCall:
    """One recorded executor call."""

    script: str
    label: str


@dataclass
class FakeHostExecutor:
    """Executor double that evaluates rendered scripts against ``properties``.

    Attributes:
        properties: Current player properties keyed by expression.
        calls: Every script executed, oldest first.
        methods: Method commands invoked, oldest first.
        raw_output: When set, returned verbatim instead of evaluating the script.
        error: When set, raised from every call.

    """

    properties: dict[str, str] = field(default_factory=dict)
    calls: list[HostCall] = field(default_factory=list)
    methods: list[str] = field(default_factory=list)
    raw_output: str | None = None
    error: Exception | None = None

    @classmethod
    def playing(cls, **overrides: Any) -> FakeHostExecutor:
        """Host with a track loaded and playing; keyword overrides replace properties."""
        properties = dict(PLAYING_STATE)
        properties.update({key.replace("__", "."): str(value) for key, value in overrides.items()})
        return cls(properties=properties)

    @classmethod
    def idle(cls) -> FakeHostExecutor:
        """Host with the player open but nothing loaded."""
        return cls(properties={"PlayerState": "0", "Mute": "False", "SoundVolume": "60"})

    async def execute(self, script_text: str, label: str = "script") -> str:
        self.calls.append(HostCall(script_text, label))
        if self.error is not None:
            raise self.error
        if self.raw_output is not None:
            return self.raw_output

        output: list[str] = []
        for line in script_text.splitlines():
            statement = line.strip()
            if not statement or statement.startswith(PREAMBLE_PREFIXES):
                continue
            self._evaluate(statement, output, label)
        return "".join(output)

    def _evaluate(self, statement: str, output: list[str], label: str) -> None:
        if match := _BATCH.match(statement):
            # [string] cast: null becomes an explicit empty line
            output.append(f"{self.properties.get(match['expr'], '')}\n")
            return
        if match := _PROBE.match(statement):
            value = self.properties.get(match["expr"], "")
            if value:
                output.append(f"{value}\n")
            return
        if match := _ASSIGN.match(statement):
            value = match["value"]
            self.properties[match["prop"]] = {"$True": "True", "$False": "False"}.get(value, value)
            return
        if match := _METHOD.match(statement):
            method = match["method"]
            self.methods.append(method)
            if method == "Play":
                self.properties["PlayerState"] = "1"
            elif method == "Pause":
                self.properties["PlayerState"] = "0"
            return

        msg = f"The term '{statement}' is not recognized"
        raise HostExecutionError(msg, label, returncode=1)

    @property
    def labels(self) -> list[str]:
        """Labels of every executed script, oldest first."""
        return [call.label for call in self.calls]
