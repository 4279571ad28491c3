"""
Ping/redirect resolution.

Starting from a possibly stale or proxy remote, follow redirect hints
until a remote confirms it is authoritative for a service and action.
Every hop consumes one unit of TTL; the TTL is the only guard against
redirect cycles.
"""

from __future__ import annotations

import logging

from .config import get_config
from .errors import ResolutionError, TTLExpiredError
from .remote import is_equivalent, normalize_remote, parse_remote
from .transport import Transport, open_transport, request
from .types import (
    PingRequest,
    PingResponse,
    RemoteAddress,
    RemoteLike,
    Resolution,
    ResolveOptions,
)
from .wire import parse_ping_response

__all__ = ["resolve", "resolve_with"]

logger = logging.getLogger(__name__)


def _is_authoritative(
    response: PingResponse,
    service_name: str,
    action_name: str | None,
    remote: RemoteAddress,
) -> bool:
    # Either an explicit found flag or an exact self-description settles it.
    if response.found:
        return True
    return (
        response.action_name == action_name
        and response.service_name == service_name
        and response.remote is not None
        and is_equivalent(response.remote, remote)
    )


async def resolve_with(
    transport: Transport,
    service_name: str,
    action_name: str | None,
    remote: RemoteLike,
    ttl: int,
) -> Resolution:
    """
    Resolve over an already open transport.

    Args:
        transport: Transport used for every ping
        service_name: Service to locate
        action_name: Action to locate, or None to identify the service only
        remote: First candidate remote
        ttl: Hop budget

    Returns:
        The authoritative Resolution, with its remote normalized

    Raises:
        TTLExpiredError: If the budget runs out before convergence
        ResolutionError: If a non-authoritative answer names no remote
        TransportError, ApplicationError: Propagated from the ping exchange
    """
    while True:
        if ttl <= 0:
            raise TTLExpiredError()

        candidate = parse_remote(remote)
        logger.debug(
            "Pinging %s for %s/%s (ttl=%d)",
            candidate.address, service_name, action_name, ttl,
        )

        data = await request(
            "", candidate, PingRequest(service_name, action_name, ttl - 1), transport
        )
        response = parse_ping_response(data if data is not None else {})

        if _is_authoritative(response, service_name, action_name, candidate):
            return Resolution(
                service_name=service_name,
                action_name=action_name,
                remote=normalize_remote(candidate),
            )

        if response.remote is None:
            raise ResolutionError(
                f"Ping response from {candidate.address} is not authoritative "
                f"and names no remote for {service_name}/{action_name}"
            )

        logger.debug(
            "Redirected from %s to %s for %s/%s",
            candidate.address, response.remote.address,
            response.service_name, response.action_name,
        )
        if response.service_name is not None:
            service_name = response.service_name
        action_name = response.action_name
        remote = response.remote
        ttl -= 1


async def resolve(
    service_name: str,
    action_name: str | None,
    remote: RemoteLike,
    options: ResolveOptions | None = None,
    *,
    transport: Transport | None = None,
) -> Resolution:
    """
    Find the authoritative remote for ``service_name`` / ``action_name``.

    Args:
        service_name: Service to locate
        action_name: Action to locate, or None to identify the service only
        remote: Starting remote (URL string, mapping or RemoteAddress)
        options: Resolution options (default TTL from configuration)
        transport: Transport to use (default: a temporary HttpTransport)

    Returns:
        The authoritative Resolution

    Example:
        resolution = await resolve("users", "get", "http://mesh.local:8080")
        print(resolution.remote)
    """
    ttl = options.ttl if options is not None else get_config().ttl
    async with open_transport(transport) as active:
        return await resolve_with(active, service_name, action_name, remote, ttl)
