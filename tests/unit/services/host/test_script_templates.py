"""Tests for script template loading and rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tunebridge.core.exceptions import ConfigurationError, TemplateError
from tunebridge.core.player_properties import TEMPLATE_PLACEHOLDER
from tunebridge.services.host import ScriptMode, ScriptTemplates
from tunebridge.services.host.script_templates import BATCH_STATEMENT_FORMAT, TEMPLATE_FILES

if TYPE_CHECKING:
    from pathlib import Path

PREAMBLE = "$itunes = New-Object -ComObject iTunes.Application\n"


def _bodies(**overrides: str) -> dict[ScriptMode, str]:
    bodies = {
        ScriptMode.PROBE: f"{PREAMBLE}Write-Output $itunes.[INPUT]\n",
        ScriptMode.COMMAND: f"{PREAMBLE}$itunes.[INPUT]\n",
        ScriptMode.BATCH_PROBE: f"{PREAMBLE}[INPUT]",
    }
    bodies.update({ScriptMode(key): value for key, value in overrides.items()})
    return bodies


class TestBundledTemplates:
    """The templates shipped with the package."""

    def test_loads_all_modes(self, templates: ScriptTemplates) -> None:
        for mode in ScriptMode:
            assert templates.body(mode).count(TEMPLATE_PLACEHOLDER) == 1

    def test_bodies_start_with_same_preamble(self, templates: ScriptTemplates) -> None:
        preambles = {templates.body(mode).splitlines()[2] for mode in ScriptMode}
        assert preambles == {"$itunes = New-Object -ComObject iTunes.Application"}

    def test_probe_prints_property(self, templates: ScriptTemplates) -> None:
        script = templates.render_probe("CurrentTrack.Name")
        assert script.splitlines()[-1] == "Write-Output $itunes.CurrentTrack.Name"

    def test_command_is_bare_statement(self, templates: ScriptTemplates) -> None:
        script = templates.render_command("Play()")
        assert script.splitlines()[-1] == "$itunes.Play()"

    def test_assignment_command(self, templates: ScriptTemplates) -> None:
        script = templates.render_command("SoundVolume = 40")
        assert script.splitlines()[-1] == "$itunes.SoundVolume = 40"


class TestRender:
    """Rendering is pure substitution of the placeholder."""

    def test_render_replaces_placeholder_only(self) -> None:
        templates = ScriptTemplates(_bodies())
        assert templates.render("Mute", ScriptMode.PROBE) == f"{PREAMBLE}Write-Output $itunes.Mute\n"

    def test_render_is_not_escaped(self) -> None:
        templates = ScriptTemplates(_bodies())
        assert templates.render_command('Name = "a; b"').endswith('$itunes.Name = "a; b"\n')

    def test_batch_renders_one_statement_per_expression_in_order(self) -> None:
        templates = ScriptTemplates(_bodies())
        script = templates.render_batch_probe(["PlayerPosition", "CurrentTrack.Name", "Mute"])

        lines = script.splitlines()[1:]
        assert lines == [
            "Write-Output ([string]$itunes.PlayerPosition)",
            "Write-Output ([string]$itunes.CurrentTrack.Name)",
            "Write-Output ([string]$itunes.Mute)",
        ]

    def test_batch_with_no_expressions_has_no_statements(self) -> None:
        templates = ScriptTemplates(_bodies())
        assert templates.render_batch_probe([]) == PREAMBLE

    def test_batch_via_render_accepts_tuple(self) -> None:
        templates = ScriptTemplates(_bodies())
        assert templates.render(("Mute",), ScriptMode.BATCH_PROBE) == templates.render_batch_probe(["Mute"])

    def test_batch_rejects_single_string(self) -> None:
        templates = ScriptTemplates(_bodies())
        with pytest.raises(TypeError):
            templates.render("Mute", ScriptMode.BATCH_PROBE)

    def test_probe_rejects_sequence(self) -> None:
        templates = ScriptTemplates(_bodies())
        with pytest.raises(TypeError):
            templates.render(["Mute"], ScriptMode.PROBE)

    def test_custom_statement_format(self) -> None:
        templates = ScriptTemplates(_bodies(), statement_format="echo {expression}")
        assert templates.render_batch_probe(["A", "B"]) == f"{PREAMBLE}echo A\necho B\n"

    def test_default_statement_format_casts_to_string(self) -> None:
        assert BATCH_STATEMENT_FORMAT.format(expression="Mute") == "Write-Output ([string]$itunes.Mute)"


class TestValidation:
    """Malformed template sets are rejected at construction."""

    def test_missing_mode(self) -> None:
        bodies = _bodies()
        del bodies[ScriptMode.COMMAND]
        with pytest.raises(TemplateError, match="command"):
            ScriptTemplates(bodies)

    def test_placeholder_missing(self) -> None:
        with pytest.raises(TemplateError, match="found 0"):
            ScriptTemplates(_bodies(probe="Write-Output $itunes.Name"))

    def test_placeholder_twice(self) -> None:
        with pytest.raises(TemplateError, match="found 2"):
            ScriptTemplates(_bodies(command="$itunes.[INPUT]; $itunes.[INPUT]"))

    def test_statement_format_without_field(self) -> None:
        with pytest.raises(TemplateError):
            ScriptTemplates(_bodies(), statement_format="Write-Output")

    def test_template_error_is_configuration_error(self) -> None:
        assert issubclass(TemplateError, ConfigurationError)


class TestFromDirectory:
    """Loading templates from a custom directory."""

    def test_loads_custom_directory(self, tmp_path: Path) -> None:
        for mode, filename in TEMPLATE_FILES.items():
            (tmp_path / filename).write_text(_bodies()[mode], encoding="utf-8")

        templates = ScriptTemplates.from_directory(tmp_path)

        assert templates.render_command("Pause()") == f"{PREAMBLE}$itunes.Pause()\n"

    def test_missing_file_raises_template_error(self, tmp_path: Path) -> None:
        (tmp_path / TEMPLATE_FILES[ScriptMode.PROBE]).write_text("[INPUT]", encoding="utf-8")

        with pytest.raises(TemplateError) as exc_info:
            ScriptTemplates.from_directory(tmp_path)

        assert exc_info.value.config_path is not None
        assert exc_info.value.config_path.endswith(TEMPLATE_FILES[ScriptMode.COMMAND])

    def test_logs_load(self, tmp_path: Path, mock_console_logger) -> None:
        for mode, filename in TEMPLATE_FILES.items():
            (tmp_path / filename).write_text(_bodies()[mode], encoding="utf-8")

        ScriptTemplates.from_directory(tmp_path, mock_console_logger)

        mock_console_logger.debug.assert_called_once()
