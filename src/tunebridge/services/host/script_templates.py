"""Script templating for the scripting host.

Renders the exact script text handed to the host by substituting an
expression into one of three fixed template bodies. Rendering is pure text
substitution: expressions come from internal call sites and are neither
escaped nor validated.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from tunebridge.core.exceptions import TemplateError
from tunebridge.core.player_properties import (
    BATCH_PROBE_TEMPLATE,
    COMMAND_TEMPLATE,
    PROBE_TEMPLATE,
    TEMPLATE_PLACEHOLDER,
)

if TYPE_CHECKING:
    import logging

# Bundled template directory
DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "scripts"

# One batch line per expression; the cast prints an explicit empty line for null values
BATCH_STATEMENT_FORMAT = "Write-Output ([string]$itunes.{expression})"


class ScriptMode(StrEnum):
    """Which template an expression is rendered into."""

    PROBE = "probe"
    COMMAND = "command"
    BATCH_PROBE = "batch_probe"


TEMPLATE_FILES: dict[ScriptMode, str] = {
    ScriptMode.PROBE: PROBE_TEMPLATE,
    ScriptMode.COMMAND: COMMAND_TEMPLATE,
    ScriptMode.BATCH_PROBE: BATCH_PROBE_TEMPLATE,
}


class ScriptTemplates:
    """Immutable set of template bodies, loaded once at construction."""

    def __init__(
        self,
        bodies: dict[ScriptMode, str],
        *,
        statement_format: str = BATCH_STATEMENT_FORMAT,
        placeholder: str = TEMPLATE_PLACEHOLDER,
    ) -> None:
        """Validate and store the template bodies.

        Args:
            bodies: Template text for every ScriptMode
            statement_format: Per-expression batch statement, with an ``{expression}`` field
            placeholder: Token replaced by the rendered expression text

        Raises:
            TemplateError: If a body is missing or does not hold exactly one placeholder

        """
        if missing := [mode.value for mode in ScriptMode if mode not in bodies]:
            msg = f"Missing script templates: {', '.join(missing)}"
            raise TemplateError(msg)

        for mode, body in bodies.items():
            count = body.count(placeholder)
            if count != 1:
                msg = f"Template '{mode}' must contain {placeholder} exactly once (found {count})"
                raise TemplateError(msg)

        if "{expression}" not in statement_format:
            msg = "Batch statement format must contain an {expression} field"
            raise TemplateError(msg)

        self._bodies = dict(bodies)
        self.statement_format = statement_format
        self.placeholder = placeholder

    @classmethod
    def from_directory(
        cls,
        templates_dir: str | Path | None = None,
        logger: logging.Logger | None = None,
    ) -> ScriptTemplates:
        """Load the three template files from *templates_dir* (bundled scripts when None).

        Raises:
            TemplateError: If a file cannot be read or is malformed

        """
        directory = Path(templates_dir) if templates_dir is not None else DEFAULT_TEMPLATES_DIR
        bodies: dict[ScriptMode, str] = {}

        for mode, filename in TEMPLATE_FILES.items():
            path = directory / filename
            try:
                bodies[mode] = path.read_text(encoding="utf-8")
            except OSError as e:
                msg = f"Cannot read script template {path}: {e}"
                raise TemplateError(msg, str(path)) from e

        if logger is not None:
            logger.debug("Loaded %d script templates from %s", len(bodies), directory)
        return cls(bodies)

    def body(self, mode: ScriptMode) -> str:
        """Return the raw template body for *mode*."""
        return self._bodies[mode]

    def render(self, expression: str | Sequence[str], mode: ScriptMode) -> str:
        """Render an expression (or, for BATCH_PROBE, an ordered list of them) into script text.

        Raises:
            TypeError: If the expression shape does not match the mode

        """
        if mode == ScriptMode.BATCH_PROBE:
            if isinstance(expression, str):
                msg = "Batch probes take a sequence of expressions, not a single string"
                raise TypeError(msg)
            return self.render_batch_probe(expression)

        if not isinstance(expression, str):
            msg = f"{mode} scripts take a single expression"
            raise TypeError(msg)
        return self._bodies[mode].replace(self.placeholder, expression)

    def render_probe(self, expression: str) -> str:
        """Render a single-property probe."""
        return self.render(expression, ScriptMode.PROBE)

    def render_command(self, expression: str) -> str:
        """Render a fire-and-forget command."""
        return self.render(expression, ScriptMode.COMMAND)

    def render_batch_probe(self, expressions: Sequence[str]) -> str:
        """Render one print statement per expression, one per line, in the given order.

        An empty sequence yields a script with no print statements.
        """
        statements = "".join(f"{self.statement_format.format(expression=expression)}\n" for expression in expressions)
        return self._bodies[ScriptMode.BATCH_PROBE].replace(self.placeholder, statements)
