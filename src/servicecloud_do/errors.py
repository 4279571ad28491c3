"""
Error codes and exceptions for servicecloud-do.

Error Code Ranges:
- 1xxx: Transport errors
- 2xxx: Application errors
- 3xxx: Resolution errors
- 4xxx: Parse errors
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Error codes carried by every ServiceCloudError."""

    # Connection failures, non-200 statuses, undecodable bodies
    TRANSPORT_ERROR = 1001

    # success: false in a call envelope
    APPLICATION_ERROR = 2001

    # Ping response that cannot be followed
    RESOLUTION_ERROR = 3001

    # Hop budget exhausted before convergence
    TTL_EXPIRED = 3002

    # Malformed remote URL or remote object
    PARSE_ERROR = 4001


ERROR_CODE_NAMES: dict[ErrorCode, str] = {
    ErrorCode.TRANSPORT_ERROR: "TRANSPORT_ERROR",
    ErrorCode.APPLICATION_ERROR: "APPLICATION_ERROR",
    ErrorCode.RESOLUTION_ERROR: "RESOLUTION_ERROR",
    ErrorCode.TTL_EXPIRED: "TTL_EXPIRED",
    ErrorCode.PARSE_ERROR: "PARSE_ERROR",
}

UNKNOWN_ERROR_MESSAGE = "Unknown error"


class ServiceCloudError(Exception):
    """
    Base error class for all servicecloud-do errors.

    Error Hierarchy:
    - ServiceCloudError (base)
      - TransportError: connection failures, non-200 statuses
      - ApplicationError: the remote action reported a failure
      - ResolutionError: a ping response could not be followed
        - TTLExpiredError: no authoritative remote within the hop budget
      - ParseError: malformed remote URL

    Example:
        ```python
        try:
            await call("users", "get", "http://mesh.local", {"id": 1})
        except ServiceCloudError as error:
            print(f"[{error.code_name}] {error.message}")
        ```

    Attributes:
        message: Human-readable error message.
        code: Numeric error code.
        code_name: String name of the error code.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        code_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.code_name = code_name or ERROR_CODE_NAMES.get(code, "UNKNOWN_ERROR")

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, code={self.code})"

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary representation of the error."""
        return {
            "name": self.__class__.__name__,
            "message": self.message,
            "code": int(self.code),
            "code_name": self.code_name,
        }


class TransportError(ServiceCloudError):
    """
    Error raised when an HTTP exchange fails.

    Error Code: 1001 (TRANSPORT_ERROR)

    Attributes:
        status: HTTP status code, or None for connection-level failures.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message, ErrorCode.TRANSPORT_ERROR)
        self.status = status


class ApplicationError(ServiceCloudError):
    """
    Error raised when a remote answers with ``success: false``.

    Error Code: 2001 (APPLICATION_ERROR)
    """

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or UNKNOWN_ERROR_MESSAGE, ErrorCode.APPLICATION_ERROR)


class ResolutionError(ServiceCloudError):
    """
    Error raised when resolution cannot continue.

    Error Code: 3001 (RESOLUTION_ERROR)
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.RESOLUTION_ERROR) -> None:
        super().__init__(message, code)


class TTLExpiredError(ResolutionError):
    """
    Error raised when the hop budget reaches zero before an authoritative
    remote is found. Distinguishes "no route" from "remote unreachable".

    Error Code: 3002 (TTL_EXPIRED)
    """

    def __init__(self, message: str = "TTL expired") -> None:
        super().__init__(message, ErrorCode.TTL_EXPIRED)


class ParseError(ServiceCloudError):
    """
    Error raised for a malformed remote URL or remote object.

    Error Code: 4001 (PARSE_ERROR)

    Attributes:
        value: The value that failed to parse.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message, ErrorCode.PARSE_ERROR)
        self.value = value


def is_error_code(error: BaseException, code: ErrorCode) -> bool:
    """
    Check if an error is a ServiceCloudError with a specific error code.

    Example:
        ```python
        try:
            await client.call("method")
        except Exception as error:
            if is_error_code(error, ErrorCode.TTL_EXPIRED):
                ...
        ```
    """
    return isinstance(error, ServiceCloudError) and error.code == code
