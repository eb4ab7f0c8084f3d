"""Pytest configuration and shared fixtures for the player bridge.

Puts the project root and ``src`` on ``sys.path`` so tests import
``tunebridge`` and ``tests.mocks`` without an installed package.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
for _path in (PROJECT_ROOT, PROJECT_ROOT / "src"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))

from tests.mocks.fake_host import FakeHostExecutor  # noqa: E402
from tunebridge.services.host import PropertyBridge, ScriptTemplates  # noqa: E402


@pytest.fixture
def mock_console_logger() -> MagicMock:
    """Mock console logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def mock_error_logger() -> MagicMock:
    """Mock error logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def templates() -> ScriptTemplates:
    """Bundled script templates."""
    return ScriptTemplates.from_directory()


@pytest.fixture
def fake_host() -> FakeHostExecutor:
    """Fake host with a track loaded and playing."""
    return FakeHostExecutor.playing()


@pytest.fixture
def bridge(
    templates: ScriptTemplates,
    fake_host: FakeHostExecutor,
    mock_console_logger: MagicMock,
    mock_error_logger: MagicMock,
) -> PropertyBridge:
    """PropertyBridge backed by the fake host."""
    return PropertyBridge(templates, fake_host, mock_console_logger, mock_error_logger)
