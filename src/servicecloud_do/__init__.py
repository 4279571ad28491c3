"""
servicecloud-do - Location-independent action calls for Python.

This package provides a client for invoking named actions on logically
named services with support for:
- Ping/redirect resolution of a service's authoritative remote
- TTL-bounded resolution that terminates on redirect cycles
- JSON-over-HTTP transport with a {success, error, data} envelope
- Action discovery and an explicit table of bound action callables
- Async/await native API

Example usage:
    from servicecloud_do import ServiceCloudClient

    async def main():
        async with ServiceCloudClient("math", "http://mesh.local:8080") as client:
            # Where does the action live right now?
            resolution = await client.resolve("square")
            print(resolution.remote)

            # Call it
            result = await client.call("square", 5)
            print(result)  # 25

            # Discover actions
            actions = await client.expand_actions()
            print(await actions["square"](6))  # 36

    import asyncio
    asyncio.run(main())
"""

from __future__ import annotations

__version__ = "0.1.0"

from .actions import ActionTable, BoundAction
from .client import (
    ServiceCloudClient,
    call,
    expand_actions,
    information,
    list_actions,
)
from .config import configure, configure_from_env, get_config
from .errors import (
    ApplicationError,
    ErrorCode,
    ParseError,
    ResolutionError,
    ServiceCloudError,
    TransportError,
    TTLExpiredError,
    is_error_code,
)
from .remote import get_url_from_remote, is_equivalent, normalize_remote, parse_remote, to_url
from .resolver import resolve
from .transport import HttpTransport, Transport, request
from .types import (
    DEFAULT_TTL,
    CallEnvelope,
    ExecuteRequest,
    InfoRequest,
    PingRequest,
    PingResponse,
    RemoteAddress,
    Resolution,
    ResolveOptions,
    ServiceInformation,
)

__all__ = [
    # Main API
    "ServiceCloudClient",
    "call",
    "resolve",
    "information",
    "list_actions",
    "expand_actions",
    "ActionTable",
    "BoundAction",
    # Remotes
    "RemoteAddress",
    "parse_remote",
    "get_url_from_remote",
    "to_url",
    "normalize_remote",
    "is_equivalent",
    # Transport
    "Transport",
    "HttpTransport",
    "request",
    # Types
    "ResolveOptions",
    "Resolution",
    "PingRequest",
    "PingResponse",
    "InfoRequest",
    "ExecuteRequest",
    "CallEnvelope",
    "ServiceInformation",
    "DEFAULT_TTL",
    # Configuration
    "configure",
    "configure_from_env",
    "get_config",
    # Errors
    "ErrorCode",
    "ServiceCloudError",
    "TransportError",
    "ApplicationError",
    "ResolutionError",
    "TTLExpiredError",
    "ParseError",
    "is_error_code",
    # Version
    "__version__",
]
