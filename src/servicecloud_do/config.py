"""
Configuration management for servicecloud-do

This module provides global configuration for resolution and transport
settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .types import DEFAULT_TTL

DEFAULT_TIMEOUT = 30.0


@dataclass
class ServiceCloudConfig:
    """servicecloud-do configuration options."""
    ttl: int = DEFAULT_TTL
    timeout: float = DEFAULT_TIMEOUT
    remote: str | None = None


def _get_env(key: str) -> str | None:
    """Get environment variable value."""
    return os.environ.get(key)


def _get_env_int(key: str) -> int | None:
    value = _get_env(key)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _get_env_float(key: str) -> float | None:
    value = _get_env(key)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


# Global configuration
_global_config: dict[str, int | float | str | None] = {
    "ttl": _get_env_int("SERVICECLOUD_TTL"),
    "timeout": _get_env_float("SERVICECLOUD_TIMEOUT"),
    "remote": _get_env("SERVICECLOUD_REMOTE"),
}


def configure(
    *,
    ttl: int | None = None,
    timeout: float | None = None,
    remote: str | None = None,
) -> None:
    """
    Configure servicecloud-do settings.

    Args:
        ttl: Default hop budget for resolution (default: 100)
        timeout: Timeout for each HTTP exchange in seconds (default: 30.0)
        remote: Default remote URL for clients created without one

    Example::

        from servicecloud_do import configure

        configure(ttl=10, remote="http://mesh.local:8080")
    """
    global _global_config

    if ttl is not None:
        _global_config["ttl"] = ttl
    if timeout is not None:
        _global_config["timeout"] = timeout
    if remote is not None:
        _global_config["remote"] = remote


def get_config() -> ServiceCloudConfig:
    """
    Get current servicecloud-do configuration.

    Returns:
        Current configuration object
    """
    ttl = _global_config["ttl"]
    timeout = _global_config["timeout"]
    remote = _global_config["remote"]
    return ServiceCloudConfig(
        ttl=int(ttl) if ttl is not None else DEFAULT_TTL,
        timeout=float(timeout) if timeout is not None else DEFAULT_TIMEOUT,
        remote=str(remote) if remote is not None else None,
    )


def configure_from_env() -> None:
    """
    Configure servicecloud-do from environment variables.

    Reads from:
        - SERVICECLOUD_TTL
        - SERVICECLOUD_TIMEOUT
        - SERVICECLOUD_REMOTE
    """
    configure(
        ttl=_get_env_int("SERVICECLOUD_TTL"),
        timeout=_get_env_float("SERVICECLOUD_TIMEOUT"),
        remote=_get_env("SERVICECLOUD_REMOTE"),
    )


def reset_config() -> None:
    """Restore the built-in defaults, ignoring the environment."""
    _global_config.update(ttl=None, timeout=None, remote=None)
