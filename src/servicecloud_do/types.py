"""
Type definitions for servicecloud-do

This module contains the data model shared by the resolver, the invoker
and the action registry. Every value is built fresh per request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .errors import UNKNOWN_ERROR_MESSAGE


DEFAULT_PORT = 80
DEFAULT_PROTOCOL = "http:"
DEFAULT_PATH = ""
DEFAULT_TTL = 100


@dataclass(frozen=True)
class RemoteAddress:
    """A network endpoint at which a service may currently be reachable."""
    address: str
    port: int | None = None
    protocol: str | None = None
    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire object with only the fields that are present."""
        result: dict[str, Any] = {"address": self.address}
        if self.port is not None:
            result["port"] = self.port
        if self.protocol is not None:
            result["protocol"] = self.protocol
        if self.path is not None:
            result["path"] = self.path
        return result


@dataclass
class InfoRequest:
    """Request a service's capability description."""

    def to_payload(self) -> dict[str, Any]:
        return {"type": "info"}


@dataclass
class PingRequest:
    """Ask a remote whether it is authoritative for a service/action."""
    service_name: str
    action_name: str | None
    ttl: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": "ping",
            "serviceName": self.service_name,
            "actionName": self.action_name,
            "ttl": self.ttl,
        }


@dataclass
class ExecuteRequest:
    """Invoke an action with an opaque payload."""
    action_name: str | None
    data: Any = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": "execute",
            "actionName": self.action_name,
            "data": self.data,
        }


@dataclass
class PingResponse:
    """Answer to a ping: either authoritative, or a pointer elsewhere."""
    found: bool = False
    service_name: str | None = None
    action_name: str | None = None
    remote: RemoteAddress | None = None


@dataclass
class CallEnvelope:
    """Response wrapper separating application success from failure."""
    success: bool
    error: str | None = None
    data: Any = None

    @property
    def error_message(self) -> str:
        """The error, or the generic fallback when the server omitted it."""
        return self.error or UNKNOWN_ERROR_MESSAGE


@dataclass
class ServiceInformation:
    """Capability description returned by an ``info`` request."""
    name: str
    actions: list[str] = field(default_factory=list)
    system_actions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Resolution:
    """The authoritative (service, action, remote) triple."""
    service_name: str
    action_name: str | None
    remote: RemoteAddress


@dataclass(frozen=True)
class ResolveOptions:
    """Options for resolution and calls."""
    ttl: int = DEFAULT_TTL
    """Hop budget. Each ping consumes one unit; zero fails immediately."""


# Accepted anywhere a remote is expected
RemoteLike = Union[RemoteAddress, Mapping[str, Any], str]
