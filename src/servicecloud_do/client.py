"""
ServiceCloudClient - invoke actions on a logically named service.

Every operation first resolves the service's authoritative remote through
the ping/redirect protocol, then sends the actual request there. The
module-level functions are one-shot equivalents of the client methods.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

from .actions import ActionTable
from .config import get_config
from .remote import parse_remote
from .resolver import resolve, resolve_with
from .transport import HttpTransport, Transport, open_transport, request
from .types import (
    ExecuteRequest,
    InfoRequest,
    RemoteAddress,
    RemoteLike,
    Resolution,
    ResolveOptions,
    ServiceInformation,
)
from .wire import parse_service_information

__all__ = [
    "ServiceCloudClient",
    "call",
    "information",
    "list_actions",
    "expand_actions",
    "resolve",
]


def _ttl(options: ResolveOptions | None) -> int:
    return options.ttl if options is not None else get_config().ttl


async def call(
    service_name: str,
    action_name: str,
    remote: RemoteLike,
    data: Any = None,
    options: ResolveOptions | None = None,
    *,
    transport: Transport | None = None,
) -> Any:
    """
    Resolve the action's authoritative remote and execute it there.

    Args:
        service_name: Service exposing the action
        action_name: Action to execute
        remote: Starting remote for resolution
        data: Opaque action payload, sent as-is
        options: Resolution options
        transport: Transport to use (default: a temporary HttpTransport)

    Returns:
        The action's result payload, unchanged

    Raises:
        TTLExpiredError, ResolutionError: If resolution does not converge
        TransportError: If an HTTP exchange fails
        ApplicationError: If the action reports ``success: false``

    Example:
        result = await call("math", "square", "http://mesh.local:8080", 5)
    """
    async with open_transport(transport) as active:
        resolution = await resolve_with(active, service_name, action_name, remote, _ttl(options))
        # The resolved action, addressed under the caller's service name
        return await request(
            service_name,
            resolution.remote,
            ExecuteRequest(resolution.action_name, data),
            active,
        )


async def information(
    service_name: str,
    remote: RemoteLike,
    options: ResolveOptions | None = None,
    *,
    transport: Transport | None = None,
) -> ServiceInformation:
    """
    Fetch a service's capability description.

    The service is resolved with no action name, which asks remotes only
    to identify the service. Nothing is cached.
    """
    async with open_transport(transport) as active:
        resolution = await resolve_with(active, service_name, None, remote, _ttl(options))
        data = await request(resolution.service_name, resolution.remote, InfoRequest(), active)

    return parse_service_information(data)


async def list_actions(
    service_name: str,
    remote: RemoteLike,
    options: ResolveOptions | None = None,
    *,
    transport: Transport | None = None,
) -> list[str]:
    """List the names of a service's actions."""
    info = await information(service_name, remote, options, transport=transport)
    return info.actions


async def expand_actions(
    service_name: str,
    remote: RemoteLike,
    options: ResolveOptions | None = None,
    *,
    transport: Transport | None = None,
) -> ActionTable:
    """
    Build an ActionTable with one callable per listed action.

    Each entry calls ``call(service_name, <action>, remote, data)`` with the
    same options and transport.
    """
    actions = await list_actions(service_name, remote, options, transport=transport)

    async def invoke(action_name: str, data: Any) -> Any:
        return await call(service_name, action_name, remote, data, options, transport=transport)

    return ActionTable(service_name, actions, invoke)


class ServiceCloudClient:
    """
    Client bound to a service name and a starting remote.

    Example:
        async with ServiceCloudClient("math", "http://mesh.local:8080") as client:
            print(await client.list_actions())
            result = await client.call("square", 5)

            actions = await client.expand_actions()
            result = await actions["square"](5)
    """

    __slots__ = ("_service_name", "_remote", "_options", "_transport", "_owns_transport")

    def __init__(
        self,
        service_name: str,
        remote: RemoteLike | None = None,
        *,
        transport: Transport | None = None,
        options: ResolveOptions | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            service_name: Logical service name
            remote: Starting remote (default: configured SERVICECLOUD_REMOTE)
            transport: Transport to use; one is created and owned otherwise
            options: Default resolution options for every operation

        Raises:
            ValueError: If no remote is given or configured
            ParseError: If the remote is malformed
        """
        if remote is None:
            remote = get_config().remote
        if remote is None:
            raise ValueError(
                "Remote required. Pass remote=... or set SERVICECLOUD_REMOTE."
            )

        self._service_name = service_name
        self._remote = parse_remote(remote)
        self._options = options
        self._owns_transport = transport is None
        self._transport: Transport = transport if transport is not None else HttpTransport()

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def remote(self) -> RemoteAddress:
        return self._remote

    def _resolve_options(self, options: ResolveOptions | None) -> ResolveOptions | None:
        return options if options is not None else self._options

    async def resolve(
        self,
        action_name: str | None = None,
        options: ResolveOptions | None = None,
    ) -> Resolution:
        """Find the authoritative remote for one of this service's actions."""
        return await resolve(
            self._service_name,
            action_name,
            self._remote,
            self._resolve_options(options),
            transport=self._transport,
        )

    async def call(
        self,
        action_name: str,
        data: Any = None,
        options: ResolveOptions | None = None,
    ) -> Any:
        """Execute an action and return its result payload."""
        return await call(
            self._service_name,
            action_name,
            self._remote,
            data,
            self._resolve_options(options),
            transport=self._transport,
        )

    async def information(self, options: ResolveOptions | None = None) -> ServiceInformation:
        """Fetch the service's capability description."""
        return await information(
            self._service_name,
            self._remote,
            self._resolve_options(options),
            transport=self._transport,
        )

    async def list_actions(self, options: ResolveOptions | None = None) -> list[str]:
        """List the service's action names."""
        info = await self.information(options)
        return info.actions

    async def expand_actions(self, options: ResolveOptions | None = None) -> ActionTable:
        """Build an ActionTable whose entries call back into this client."""
        actions = await self.list_actions(options)

        async def invoke(action_name: str, data: Any) -> Any:
            return await self.call(action_name, data, options)

        return ActionTable(self._service_name, actions, invoke)

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self._transport, HttpTransport):
            await self._transport.aclose()

    async def __aenter__(self) -> ServiceCloudClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"ServiceCloudClient({self._service_name!r}, {self._remote!r})"
