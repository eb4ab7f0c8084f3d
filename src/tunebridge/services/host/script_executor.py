"""Scripting host subprocess execution module.

Runs one script per call in a fresh, headless host process: the script text
is written to the host's stdin, stdout is captured verbatim, and the process
is cleaned up afterwards. Empty output is a successful result.
"""

from __future__ import annotations

import asyncio
import subprocess
import sys
import time
from typing import TYPE_CHECKING, Any

from tunebridge.core.models.config_models import DEFAULT_HOST_ARGUMENTS, DEFAULT_HOST_EXECUTABLE

if TYPE_CHECKING:
    import logging

    from tunebridge.core.models.config_models import HostConfig


RESULT_PREVIEW_LENGTH = 50  # characters shown when previewing single-value results
LOG_PREVIEW_LENGTH = 200  # characters shown when previewing stderr
PROCESS_EXIT_WAIT_SECONDS = 0.5
PROCESS_KILL_WAIT_SECONDS = 5.0


class HostScriptError(OSError):
    """Base class for scripting host failures.

    Both subclasses are fatal for the call that raised them and are never retried.
    """

    def __init__(self, message: str, label: str) -> None:
        """Initialize the error.

        Args:
            message: Error description
            label: Script label for context

        """
        super().__init__(message)
        self.label = label


class HostSpawnError(HostScriptError):
    """The host process could not be started or died abnormally."""


class HostExecutionError(HostScriptError):
    """The host ran but reported failure (error exit, deadline expiry, undecodable output)."""

    def __init__(self, message: str, label: str, returncode: int | None = None) -> None:
        """Initialize the execution error.

        Args:
            message: Error description
            label: Script label for context
            returncode: Host exit code, when the process exited on its own

        """
        super().__init__(message, label)
        self.returncode = returncode


def _creation_kwargs() -> dict[str, Any]:
    """Extra process creation arguments that keep the host window hidden on Windows."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {}


class HostScriptExecutor:
    """Runs script text through the external scripting host.

    Holds no mutable state between calls, so one instance can serve
    concurrent callers; each call spawns its own process.
    """

    def __init__(
        self,
        console_logger: logging.Logger,
        error_logger: logging.Logger,
        *,
        executable: str = DEFAULT_HOST_EXECUTABLE,
        arguments: list[str] | tuple[str, ...] = DEFAULT_HOST_ARGUMENTS,
        timeout_seconds: float | None = None,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize the executor.

        Args:
            console_logger: Logger for debug/info messages
            error_logger: Logger for error messages
            executable: Scripting host executable
            arguments: Arguments putting the host in headless stdin mode
            timeout_seconds: Optional deadline per call; None waits for exit
            encoding: Encoding of the script text and the host's stdout

        """
        self.console_logger = console_logger
        self.error_logger = error_logger
        self.command: tuple[str, ...] = (executable, *arguments)
        self.timeout_seconds = timeout_seconds
        self.encoding = encoding

    @classmethod
    def from_config(
        cls,
        host_config: HostConfig,
        console_logger: logging.Logger,
        error_logger: logging.Logger,
    ) -> HostScriptExecutor:
        """Build an executor from the ``host`` configuration section."""
        return cls(
            console_logger,
            error_logger,
            executable=host_config.executable,
            arguments=host_config.arguments,
            timeout_seconds=host_config.timeout_seconds,
            encoding=host_config.output_encoding,
        )

    def log_script_success(self, label: str, script_result: str, elapsed: float) -> None:
        """Log a successful execution with a result preview or line count."""
        size = len(script_result.encode(self.encoding))

        if label.startswith("batch_probe"):
            line_count = len(script_result.splitlines())
            self.console_logger.debug("◁ %s: %d lines (%dB, %.1fs)", label, line_count, size, elapsed)
            return

        preview_text = script_result.strip()
        if not preview_text:
            self.console_logger.debug("◁ %s: empty output (%.1fs)", label, elapsed)
            return

        preview = f"{preview_text[:RESULT_PREVIEW_LENGTH]}..." if len(preview_text) > RESULT_PREVIEW_LENGTH else preview_text
        self.console_logger.debug("◁ %s (%dB, %.1fs) %s", label, size, elapsed, preview)

    async def cleanup_process(self, proc: asyncio.subprocess.Process, label: str) -> None:
        """Make sure the host process has exited, killing it if necessary."""
        if proc.returncode is not None:
            return
        try:
            async with asyncio.timeout(PROCESS_EXIT_WAIT_SECONDS):
                await proc.wait()
            self.console_logger.debug("Process for %s exited naturally and cleaned up", label)
        except TimeoutError:
            try:
                proc.kill()
                async with asyncio.timeout(PROCESS_KILL_WAIT_SECONDS):
                    await proc.wait()
                self.console_logger.debug("Process for %s killed and cleaned up", label)
            except (TimeoutError, ProcessLookupError) as e:
                self.console_logger.warning("Could not kill or wait for process %s during cleanup: %s", label, e)

    async def _spawn(self, label: str) -> asyncio.subprocess.Process:
        """Start the host process with all three standard streams piped.

        Raises:
            HostSpawnError: If the executable cannot be started

        """
        try:
            return await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                **_creation_kwargs(),
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.error_logger.exception("⊗ %s could not start %s: %s", label, self.command[0], e)
            msg = f"could not start scripting host '{self.command[0]}': {e}"
            raise HostSpawnError(msg, label) from e

    async def execute(self, script_text: str, label: str = "script") -> str:
        """Run *script_text* in a fresh host process and return its stdout verbatim.

        Args:
            script_text: Complete script for the host
            label: Label for logging and error context

        Returns:
            Captured standard output, possibly an empty string

        Raises:
            HostSpawnError: Host could not be started or was killed by a signal
            HostExecutionError: Non-zero exit, deadline expiry or undecodable output
            asyncio.CancelledError: If the awaiting task was cancelled

        """
        self.console_logger.debug("▷ %s", label)
        start_time = time.monotonic()
        proc = await self._spawn(label)

        try:
            async with asyncio.timeout(self.timeout_seconds):
                stdout, stderr = await proc.communicate(script_text.encode(self.encoding))
            elapsed = time.monotonic() - start_time

            if stderr:
                stderr_text = stderr.decode(self.encoding, errors="replace").strip()
                if stderr_text:
                    self.console_logger.warning("◁ %s stderr: %s", label, stderr_text[:LOG_PREVIEW_LENGTH])

            if proc.returncode == 0:
                # No strip(): callers receive the raw text
                script_result = stdout.decode(self.encoding)
                self.log_script_success(label, script_result, elapsed)
                return script_result

            error_msg = stderr.decode(self.encoding, errors="replace").strip() if stderr else f"return code {proc.returncode}"
            if proc.returncode is not None and proc.returncode < 0:
                self.error_logger.error("◁ %s host terminated by signal %d", label, -proc.returncode)
                msg = f"scripting host terminated by signal {-proc.returncode}"
                raise HostSpawnError(msg, label)

            self.error_logger.error("◁ %s failed with return code %s: %s", label, proc.returncode, error_msg[:LOG_PREVIEW_LENGTH])
            raise HostExecutionError(error_msg, label, returncode=proc.returncode)

        except TimeoutError as e:
            self.error_logger.exception("⊗ %s timeout: %ss exceeded", label, self.timeout_seconds)
            msg = f"timeout after {self.timeout_seconds}s"
            raise HostExecutionError(msg, label) from e

        except UnicodeDecodeError as e:
            self.error_logger.exception("⊗ %s produced output that is not valid %s", label, self.encoding)
            raise HostExecutionError(str(e), label) from e

        except HostScriptError:
            raise

        except (BrokenPipeError, ConnectionResetError) as e:
            self.error_logger.exception("⊗ %s host closed its input early: %s", label, e)
            msg = f"scripting host exited before reading the script: {e}"
            raise HostSpawnError(msg, label) from e

        except asyncio.CancelledError:
            self.console_logger.info("⊗ %s cancelled", label)
            raise

        finally:
            await self.cleanup_process(proc, label)
