"""
Validation of JSON received from remotes.

Response bodies, ping answers, service information and remote objects are
checked against pydantic models, then converted to the dataclasses in
``types``. Both camelCase and snake_case keys are accepted and extra keys
are ignored for forward compatibility.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ParseError, ResolutionError, TransportError
from .types import CallEnvelope, PingResponse, RemoteAddress, ServiceInformation

__all__ = [
    "parse_remote_object",
    "parse_envelope",
    "parse_ping_response",
    "parse_service_information",
]

_MODEL_CONFIG = {
    "populate_by_name": True,
    "extra": "ignore",
}


class RemoteModel(BaseModel):
    """Wire form of a remote address."""

    address: str
    port: int | None = None
    protocol: str | None = None
    path: str | None = None

    model_config = _MODEL_CONFIG

    @field_validator("address", mode="before")
    @classmethod
    def validate_address_not_empty(cls, v: Any) -> str:
        """A remote without an address cannot be contacted."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("address must be a non-empty string")
        return v


class EnvelopeModel(BaseModel):
    """The {success, error, data} wrapper around every response."""

    success: bool = False
    error: str | None = None
    data: Any = None

    model_config = _MODEL_CONFIG


class PingResponseModel(BaseModel):
    """Answer to a ping request."""

    found: bool | None = None
    service_name: str | None = Field(default=None, alias="serviceName")
    action_name: str | None = Field(default=None, alias="actionName")
    remote: RemoteModel | None = None

    model_config = _MODEL_CONFIG


class ServiceInformationModel(BaseModel):
    """Answer to an info request."""

    name: str = ""
    actions: list[str] = Field(default_factory=list)
    system_actions: list[str] = Field(default_factory=list, alias="systemActions")

    model_config = _MODEL_CONFIG


def _describe(e: ValidationError) -> str:
    # First error only, for a readable message
    errors = e.errors()
    if not errors:
        return str(e)
    first_error = errors[0]
    field = ".".join(str(loc) for loc in first_error.get("loc", []))
    msg = first_error.get("msg", "validation error")
    return f"{field} - {msg}" if field else msg


def _to_remote(model: RemoteModel) -> RemoteAddress:
    return RemoteAddress(
        address=model.address,
        port=model.port,
        protocol=model.protocol,
        path=model.path,
    )


def parse_remote_object(data: Mapping[str, Any]) -> RemoteAddress:
    """
    Validate a remote given as a mapping.

    Raises:
        ParseError: If the address is missing or a field has the wrong type

    Example:
        >>> parse_remote_object({"address": "h", "port": "9000"})
        RemoteAddress(address='h', port=9000, protocol=None, path=None)
    """
    try:
        model = RemoteModel.model_validate(dict(data))
    except ValidationError as e:
        raise ParseError(f"Invalid remote: {_describe(e)}", value=data) from e
    return _to_remote(model)


def parse_envelope(body: Any, url: str) -> CallEnvelope:
    """
    Validate a response body as a call envelope.

    Raises:
        TransportError: If the body is not an envelope object
    """
    if not isinstance(body, Mapping):
        raise TransportError(
            f"Malformed response envelope from {url}: expected JSON object, "
            f"got {type(body).__name__}"
        )
    try:
        model = EnvelopeModel.model_validate(dict(body))
    except ValidationError as e:
        raise TransportError(f"Malformed response envelope from {url}: {_describe(e)}") from e
    return CallEnvelope(success=model.success, error=model.error, data=model.data)


def parse_ping_response(data: Any) -> PingResponse:
    """
    Validate the data of a ping answer.

    Raises:
        ResolutionError: If the answer is not a valid ping response
    """
    if not isinstance(data, Mapping):
        raise ResolutionError(
            f"Malformed ping response: expected JSON object, got {type(data).__name__}"
        )
    try:
        model = PingResponseModel.model_validate(dict(data))
    except ValidationError as e:
        raise ResolutionError(f"Malformed ping response: {_describe(e)}") from e

    return PingResponse(
        found=bool(model.found),
        service_name=model.service_name,
        action_name=model.action_name,
        remote=_to_remote(model.remote) if model.remote is not None else None,
    )


def parse_service_information(data: Any) -> ServiceInformation:
    """
    Validate the data of an info answer.

    Raises:
        TransportError: If the answer is not valid service information
    """
    if not isinstance(data, Mapping):
        raise TransportError(
            f"Malformed service information: expected JSON object, got {type(data).__name__}"
        )
    try:
        model = ServiceInformationModel.model_validate(dict(data))
    except ValidationError as e:
        raise TransportError(f"Malformed service information: {_describe(e)}") from e

    return ServiceInformation(
        name=model.name,
        actions=list(model.actions),
        system_actions=list(model.system_actions),
    )
