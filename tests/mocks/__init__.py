"""Mock infrastructure for player bridge tests."""

from __future__ import annotations

from tests.mocks.fake_host import FakeHostExecutor, HostCall

__all__ = [
    "FakeHostExecutor",
    "HostCall",
]
