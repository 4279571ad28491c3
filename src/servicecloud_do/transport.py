"""
HTTP transport for servicecloud-do.

A transport performs one JSON POST exchange. ``request`` layers the
``{success, error, data}`` envelope on top of it.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Any, Protocol, Union, runtime_checkable

import httpx

from .config import get_config
from .errors import ApplicationError, TransportError
from .remote import get_url_from_remote
from .types import ExecuteRequest, InfoRequest, PingRequest, RemoteLike
from .wire import parse_envelope

__all__ = ["Transport", "HttpTransport", "open_transport", "request", "ServiceRequest"]

logger = logging.getLogger(__name__)

ServiceRequest = Union[InfoRequest, PingRequest, ExecuteRequest]


@runtime_checkable
class Transport(Protocol):
    """Single request/response exchange against a URL."""

    async def post(self, url: str, payload: dict[str, Any]) -> Any:
        """
        Send ``payload`` to ``url`` and return the decoded JSON body.

        Raises:
            TransportError: On connection failure, a non-200 status or
                an undecodable body
        """
        ...


class HttpTransport:
    """
    Transport over ``httpx.AsyncClient``.

    A client passed in stays owned by the caller. Otherwise one is created
    on first use and closed by ``aclose()``.

    Example:
        async with HttpTransport(timeout=5.0) as transport:
            result = await call("users", "get", remote, {"id": 1}, transport=transport)
    """

    __slots__ = ("_client", "_owns_client", "_timeout", "_headers")

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout if timeout is not None else get_config().timeout
        self._headers = {"Content-Type": "application/json", **(headers or {})}

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def post(self, url: str, payload: dict[str, Any]) -> Any:
        client = self._get_client()

        try:
            response = await client.post(url, json=payload, headers=self._headers)
        except httpx.InvalidURL as e:
            raise TransportError(f"Invalid request URL {url}: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            raise TransportError(
                f"Error {response.status_code} - {response.reason_phrase}",
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON response from {url}",
                status=response.status_code,
            ) from e

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


@asynccontextmanager
async def open_transport(transport: Transport | None = None) -> AsyncIterator[Transport]:
    """Yield ``transport``, or a temporary HttpTransport closed on exit."""
    if transport is not None:
        yield transport
        return

    async with HttpTransport() as temporary:
        yield temporary


async def request(
    service_name: str,
    remote: RemoteLike,
    service_request: ServiceRequest,
    transport: Transport,
) -> Any:
    """
    Send a service request and unwrap the response envelope.

    Args:
        service_name: Service path segment; empty to address the remote itself
        remote: Where to send the request
        service_request: ``info``, ``ping`` or ``execute`` request
        transport: Transport performing the exchange

    Returns:
        The envelope's ``data``

    Raises:
        TransportError: If the exchange fails or the body is not an envelope
        ApplicationError: If the envelope reports ``success: false``
    """
    url = get_url_from_remote(service_name, remote)
    payload = service_request.to_payload()
    logger.debug("POST %s type=%s", url, payload["type"])

    body = await transport.post(url, payload)
    envelope = parse_envelope(body, url)
    if not envelope.success:
        raise ApplicationError(envelope.error_message)
    return envelope.data
