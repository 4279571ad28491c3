"""
Remote address model.

Parses remotes from URL strings or wire objects, builds request URLs and
decides when two remotes name the same endpoint.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .errors import ParseError
from .types import (
    DEFAULT_PATH,
    DEFAULT_PORT,
    DEFAULT_PROTOCOL,
    RemoteAddress,
    RemoteLike,
)
from .wire import parse_remote_object

__all__ = [
    "parse_remote",
    "get_url_from_remote",
    "to_url",
    "normalize_remote",
    "is_equivalent",
]


def parse_remote(remote: RemoteLike) -> RemoteAddress:
    """
    Parse a remote from a RemoteAddress, a wire object or a URL string.

    Args:
        remote: ``RemoteAddress`` (returned as-is), mapping with an
            ``address`` key, or URL such as ``"http://mesh.local:8080/api"``

    Returns:
        The parsed RemoteAddress. Absent URL parts stay ``None``.

    Raises:
        ParseError: If the URL is malformed or has no host
    """
    if isinstance(remote, RemoteAddress):
        return remote

    if isinstance(remote, Mapping):
        return parse_remote_object(remote)

    if not isinstance(remote, str):
        raise ParseError(f"Unsupported remote: {remote!r}", value=remote)

    try:
        url = httpx.URL(remote)
    except httpx.InvalidURL as e:
        raise ParseError(f"Invalid remote URL {remote!r}: {e}", value=remote) from e

    if not url.host:
        raise ParseError(f"Remote URL has no host: {remote!r}", value=remote)

    # Remotes carry no query; request URLs are built from the path alone
    if url.query or url.fragment:
        raise ParseError(f"Remote URL must not have a query or fragment: {remote!r}", value=remote)

    path = url.path
    return RemoteAddress(
        address=url.host,
        port=url.port,
        protocol=f"{url.scheme}:" if url.scheme else None,
        # A bare "/" carries no more information than no path at all
        path=path if path and path != "/" else None,
    )


def _strip_slashes(value: str, *, trailing: bool = False) -> str:
    value = value.lstrip("/")
    if trailing:
        value = value.rstrip("/")
    return value


def get_url_from_remote(service_name: str, remote: RemoteLike) -> str:
    """
    Build the absolute URL for a request to ``service_name`` at ``remote``.

    Leading slashes are stripped from the service name, and leading and
    trailing slashes from the remote path. Missing values default to
    ``http:``, port ``80`` and an empty path. IPv6 addresses are
    bracketed.

    Example:
        >>> get_url_from_remote("svc", {"address": "h", "path": "//a/b//"})
        'http://h:80/a/b/svc'
    """
    service_name = _strip_slashes(service_name)
    parsed = parse_remote(remote)

    path = _strip_slashes(parsed.path or DEFAULT_PATH, trailing=True)
    if path:
        path = "/" + path

    protocol = parsed.protocol or DEFAULT_PROTOCOL
    port = parsed.port or DEFAULT_PORT
    address = parsed.address
    if ":" in address and not address.startswith("["):
        address = f"[{address}]"
    return f"{protocol}//{address}:{port}{path}/{service_name}"


to_url = get_url_from_remote


def normalize_remote(remote: RemoteLike) -> RemoteAddress:
    """Return the remote with every absent field set to its default."""
    parsed = parse_remote(remote)
    return RemoteAddress(
        address=parsed.address,
        port=parsed.port if parsed.port is not None else DEFAULT_PORT,
        protocol=parsed.protocol if parsed.protocol is not None else DEFAULT_PROTOCOL,
        path=parsed.path if parsed.path is not None else DEFAULT_PATH,
    )


def _same(value1: Any, value2: Any, default: Any) -> bool:
    return (
        value1 == value2
        or (value1 == default and value2 is None)
        or (value1 is None and value2 == default)
    )


def is_equivalent(a: RemoteLike, b: RemoteLike) -> bool:
    """
    Whether two remotes name the same endpoint.

    Fields compare equal when they are literally equal or when one holds
    the default value and the other is absent.
    """
    first = parse_remote(a)
    second = parse_remote(b)
    return (
        first.address == second.address
        and _same(first.port, second.port, DEFAULT_PORT)
        and _same(first.protocol, second.protocol, DEFAULT_PROTOCOL)
        and _same(first.path, second.path, DEFAULT_PATH)
    )
