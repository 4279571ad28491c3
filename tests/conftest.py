"""
Pytest configuration and fixtures for servicecloud-do tests.

This module provides fixtures for:
- An empty FakeMesh to script ping/info/execute responses
- Isolating the global configuration between tests
"""

import pytest

from .mock_server import FakeMesh


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Clear SERVICECLOUD_* variables and reset global configuration."""
    from servicecloud_do.config import reset_config

    for key in ("SERVICECLOUD_TTL", "SERVICECLOUD_TIMEOUT", "SERVICECLOUD_REMOTE"):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def mesh() -> FakeMesh:
    """An empty fake mesh."""
    return FakeMesh()
