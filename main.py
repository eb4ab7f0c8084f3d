#!/usr/bin/env python3
"""Player bridge entry point.

Prints what the media player is currently playing and, with ``--control``,
reads ``play``/``pause`` commands from stdin until ``quit`` or end of input.
"""

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path

# Add src directory to Python path BEFORE imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from tunebridge.app.now_playing import describe_snapshot, run_control_loop
from tunebridge.core.config import load_config_or_default
from tunebridge.core.exceptions import ConfigurationError
from tunebridge.core.logger import get_loggers
from tunebridge.services.dependency_container import DependencyContainer
from tunebridge.services.host import HostScriptError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="python main.py",
        description="Show the media player's current track and optionally control playback",
    )
    parser.add_argument("--config", help="Path to the YAML config (default: $CONFIG_PATH or config.yaml)")
    parser.add_argument("--control", action="store_true", help="Read play/pause commands from stdin after the summary")
    parser.add_argument("--dry-run", action="store_true", help="Record commands instead of sending them")
    return parser.parse_args(argv)


def _handle_critical_error(error: Exception, logger_error: logging.Logger | None) -> None:
    """Log a fatal error and exit."""
    if logger_error:
        logger_error.critical("A critical error occurred: %s", error, exc_info=True)
    else:
        print(f"A critical error occurred: {error}", file=sys.stderr)
    sys.exit(1)


async def main_async(args: argparse.Namespace) -> None:
    """Execute main async entry point."""
    start_time = time.time()

    try:
        config = load_config_or_default(args.config)
    except ConfigurationError as e:
        _handle_critical_error(e, None)
        return

    if args.dry_run:
        config = config.model_copy(update={"dry_run": True})

    logger_console, logger_error, listener = get_loggers(config)
    deps = None

    try:
        deps = DependencyContainer(config, logger_console, logger_error, logging_listener=listener)
        snapshot = await deps.song_interface.get_song_info()
        print(describe_snapshot(snapshot))

        if args.control:
            await run_control_loop(deps.player_controls, sys.stdin, logger=logger_console)

    except KeyboardInterrupt:
        logger_console.info("\nInterrupted by user.")
        sys.exit(130)

    except (HostScriptError, ConfigurationError, ValueError) as e:
        _handle_critical_error(e, logger_error)

    finally:
        logger_console.debug("Total execution time: %.2f seconds", time.time() - start_time)
        if deps is not None:
            deps.shutdown()
        elif listener is not None:
            listener.stop()


def main() -> None:
    """Execute the main entry point."""
    asyncio.run(main_async(parse_args()))


if __name__ == "__main__":
    main()
