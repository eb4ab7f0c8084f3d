"""Dependency Injection Container Module.

Builds the bridge stack from configuration: script templates, the host
executor, the property bridge (or its dry-run variant) and the presentation
services on top of it. The container is constructed explicitly and passed
around; tests construct the pieces directly with fake executors instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tunebridge.app.player_controls import PlayerControls
from tunebridge.app.song_interface import SongInterface
from tunebridge.core.logger import LogFormat, shorten_path
from tunebridge.services.host import (
    DryRunPropertyBridge,
    HostScriptExecutor,
    PropertyBridge,
    ScriptTemplates,
)

if TYPE_CHECKING:
    import logging

    from tunebridge.core.logger import QueueLogListener
    from tunebridge.core.models.config_models import AppConfig
    from tunebridge.core.models.protocols import ScriptExecutorProtocol


class DependencyContainer:
    """Owns the configured bridge and the services built on it."""

    def __init__(
        self,
        config: AppConfig,
        console_logger: logging.Logger,
        error_logger: logging.Logger,
        *,
        logging_listener: QueueLogListener | None = None,
        executor: ScriptExecutorProtocol | None = None,
    ) -> None:
        """Build every service from *config*.

        Args:
            config: Validated application configuration
            console_logger: Logger for console output
            error_logger: Logger for error messages
            logging_listener: Queue listener stopped on shutdown
            executor: Executor override; a HostScriptExecutor built from ``config.host`` when None

        Raises:
            TemplateError: If the configured templates cannot be loaded

        """
        self.config = config
        self.console_logger = console_logger
        self.error_logger = error_logger
        self._listener = logging_listener

        self.templates = ScriptTemplates.from_directory(config.templates_dir, console_logger)
        self.executor: ScriptExecutorProtocol = executor or HostScriptExecutor.from_config(config.host, console_logger, error_logger)

        bridge_class = DryRunPropertyBridge if config.dry_run else PropertyBridge
        self.bridge: PropertyBridge = bridge_class(self.templates, self.executor, console_logger, error_logger)

        self.song_interface = SongInterface(self.bridge, console_logger)
        self.player_controls = PlayerControls(self.bridge, console_logger)

        self.console_logger.info(
            "%s initialized (host: %s, templates: %s%s)",
            LogFormat.entity("DependencyContainer"),
            config.host.executable,
            shorten_path(config.templates_dir, config) if config.templates_dir else "bundled",
            ", dry run" if config.dry_run else "",
        )

    @property
    def dry_run(self) -> bool:
        """Whether commands are recorded instead of executed."""
        return self.config.dry_run

    def shutdown(self) -> None:
        """Stop the logging listener, flushing queued file records."""
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
