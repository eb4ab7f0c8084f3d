"""Logging for the player bridge.

Two destinations share one set of loggers:

* the terminal, through a ``rich`` ``RichHandler`` on a single shared console;
* ``<logs_base_dir>/<logging.main_log_file>``, written from a background
  ``QueueListener`` thread so host calls never block on file IO.

Each process run is framed in the log file by a banner block, and the file
is cut back to the last ``logging.max_runs`` runs when the handler closes.
``print`` is only used when the logging machinery itself fails.
"""

from __future__ import annotations

import logging
import os
import queue
import sys
import time
import traceback
from datetime import UTC, datetime
from functools import lru_cache
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from tunebridge.core.models.config_models import AppConfig

CONSOLE_LOGGER_NAME = "console_logger"
ERROR_LOGGER_NAME = "error_logger"
CONFIG_LOGGER_NAME = "config"

FILE_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(short_pathname)s:%(lineno)d - %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVEL_LETTERS = {"DEBUG": "D", "INFO": "I", "WARNING": "W", "ERROR": "E", "CRITICAL": "C"}

RUN_BANNER = "=" * 80
RUN_START_MARKER = "NEW RUN:"


@lru_cache(maxsize=1)
def get_shared_console() -> Console:
    """Return the process-wide Rich console so output lines never interleave."""
    return Console()


class LogFormat:
    """Rich markup helpers for console messages."""

    @staticmethod
    def entity(name: str) -> str:
        """Highlight a component or expression name."""
        return f"[yellow]{name}[/yellow]"


class QueueLogListener(QueueListener):
    """QueueListener whose ``stop`` may be called repeatedly, or before ``start``."""

    def stop(self) -> None:
        if getattr(self, "_thread", None) is None:
            return
        try:
            super().stop()
        except RuntimeError as e:
            print(f"Warning: could not stop log listener: {e}", file=sys.stderr)


class RunTracker:
    """Writes run banners and keeps a log file to its most recent runs."""

    def __init__(self, max_runs: int = 3) -> None:
        self.max_runs = max_runs
        self.started = time.monotonic()

    @staticmethod
    def header(logger_name: str) -> str:
        stamp = datetime.now(UTC).strftime(FILE_DATE_FORMAT)
        return f"\n{RUN_BANNER}\n{RUN_START_MARKER} {logger_name} - {stamp}\n{RUN_BANNER}\n"

    def footer(self) -> str:
        return f"{RUN_BANNER}\nEND RUN: {time.monotonic() - self.started:.2f}s\n{RUN_BANNER}\n"

    def trim(self, log_file: str | Path) -> None:
        """Drop everything before the last ``max_runs`` run headers; 0 keeps everything."""
        path = Path(log_file)
        if self.max_runs <= 0 or not path.exists():
            return

        try:
            lines = path.read_text(encoding="utf-8", errors="ignore").splitlines(keepends=True)
            starts = [
                index
                for index in range(len(lines) - 1)
                if lines[index].rstrip("\n") == RUN_BANNER and lines[index + 1].startswith(RUN_START_MARKER)
            ]
            if len(starts) <= self.max_runs:
                return

            trimmed = path.with_name(f"{path.name}.tmp")
            trimmed.write_text("".join(lines[starts[-self.max_runs] :]), encoding="utf-8")
            trimmed.replace(path)
        except OSError as e:
            print(f"Could not trim log file {path}: {e}", file=sys.stderr)


def shorten_path(path: str, config: AppConfig | None = None) -> str:
    """Shorten *path* for log output.

    Paths under the configured templates or logs directory become
    ``$TEMPLATES/...`` or ``$LOGS/...``, paths under the home directory start
    with ``~`` and any other absolute path is reduced to its file name.
    """
    if not path:
        return ""

    normalized = os.path.normpath(path)

    aliases: list[tuple[str, str]] = []
    if config is not None:
        if config.templates_dir:
            aliases.append(("$TEMPLATES", str(Path(config.templates_dir).resolve())))
        aliases.append(("$LOGS", str(Path(config.logs_base_dir).resolve())))

    for alias, directory in aliases:
        if normalized == directory:
            return alias
        if normalized.startswith(directory + os.sep):
            return alias + normalized[len(directory) :]

    home = str(Path.home())
    if normalized == home:
        return "~"
    if normalized.startswith(home + os.sep):
        return "~" + normalized[len(home) :]

    return Path(normalized).name if os.path.isabs(normalized) else normalized


class CompactFormatter(logging.Formatter):
    """File formatter with one-letter levels and a ``%(short_pathname)s`` field."""

    def __init__(self, fmt: str = FILE_LOG_FORMAT, datefmt: str = FILE_DATE_FORMAT, *, config: AppConfig | None = None) -> None:
        super().__init__(fmt, datefmt)
        self.config = config

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        record.levelname = LEVEL_LETTERS.get(levelname, levelname[:1])
        record.short_pathname = shorten_path(record.pathname, self.config)
        try:
            return super().format(record)
        finally:
            # Other handlers see the same record
            record.levelname = levelname
            del record.short_pathname


class RunFileHandler(logging.FileHandler):
    """FileHandler that frames each run with banners and trims old runs on close."""

    def __init__(self, filename: str | Path, tracker: RunTracker) -> None:
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        super().__init__(filename, mode="a", encoding="utf-8")
        self.tracker = tracker
        self._started = False
        self._finished = False

    def emit(self, record: logging.LogRecord) -> None:
        if not self._started:
            self._started = True
            try:
                self.stream.write(self.tracker.header(record.name))
            except OSError:
                self.handleError(record)
        super().emit(record)

    def close(self) -> None:
        if self._finished:
            return
        self._finished = True
        try:
            if self._started and self.stream is not None:
                self.stream.write(self.tracker.footer())
                self.flush()
        except (OSError, ValueError) as e:
            print(f"Could not write log footer to {self.baseFilename}: {e}", file=sys.stderr)
        finally:
            super().close()
            self.tracker.trim(self.baseFilename)


def log_levels(config: AppConfig) -> tuple[int, int]:
    """Return the (console, file) levels from the ``logging.levels`` section."""
    names = logging.getLevelNamesMapping()
    levels = config.logging.levels
    return names.get(str(levels.console), logging.INFO), names.get(str(levels.main_file), logging.DEBUG)


def main_log_path(config: AppConfig) -> Path:
    """Path of the main log file, with its directory created."""
    path = Path(config.logs_base_dir).expanduser() / config.logging.main_log_file
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _attach_console(name: str, console_level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(
            RichHandler(
                level=console_level,
                console=get_shared_console(),
                show_path=False,
                log_time_format="%H:%M:%S",
                markup=True,
            )
        )
    return logger


def get_loggers(config: AppConfig) -> tuple[logging.Logger, logging.Logger, QueueLogListener | None]:
    """Configure console and file logging.

    Returns:
        ``(console_logger, error_logger, listener)``. Stop the listener on
        exit to flush queued records. If setup fails, plain stream loggers
        and a ``None`` listener are returned instead.

    """
    try:
        console_level, file_level = log_levels(config)
        file_handler = RunFileHandler(main_log_path(config), RunTracker(config.logging.max_runs))
    except (OSError, ValueError) as e:
        return _fallback_loggers(e)

    file_handler.setLevel(file_level)
    file_handler.setFormatter(CompactFormatter(config=config))

    records: queue.Queue[logging.LogRecord] = queue.Queue()
    listener = QueueLogListener(records, file_handler, respect_handler_level=True)
    listener.start()
    queue_handler = QueueHandler(records)

    console_logger = _attach_console(CONSOLE_LOGGER_NAME, console_level)
    error_logger = _attach_console(ERROR_LOGGER_NAME, console_level)
    for name in (CONSOLE_LOGGER_NAME, ERROR_LOGGER_NAME, CONFIG_LOGGER_NAME):
        logger = logging.getLogger(name)
        for handler in [handler for handler in logger.handlers if isinstance(handler, QueueHandler)]:
            logger.removeHandler(handler)
        logger.addHandler(queue_handler)
        logger.setLevel(min(console_level, file_level))
        logger.propagate = False

    console_logger.debug("Logging to %s", shorten_path(file_handler.baseFilename, config))
    return console_logger, error_logger, listener


def _fallback_loggers(error: Exception) -> tuple[logging.Logger, logging.Logger, None]:
    """Plain stderr logging for when the regular setup fails."""
    print(f"Logging setup failed, falling back to basic logging: {error}", file=sys.stderr)
    traceback.print_exc(file=sys.stderr)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    return logging.getLogger(CONSOLE_LOGGER_NAME), logging.getLogger(ERROR_LOGGER_NAME), None
