"""
Error taxonomy for the jsonwire client.

Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the client."""

    # Configuration
    CONFIG_ERROR = "CONFIG_ERROR"

    # Request building
    ENCODE_ERROR = "ENCODE_ERROR"

    # Dispatch
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    TRANSPORT_TIMEOUT = "TRANSPORT_TIMEOUT"

    # Response handling
    API_ERROR = "API_ERROR"
    DECODE_ERROR = "DECODE_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class JsonWireError(BaseModel):
    """
    Structured error model.

    Used for passing errors around without exceptions, e.g. when a caller
    wants to serialize a failure into its own API response.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.TRANSPORT_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "JsonWireException":
        """Convert this error model to a raisable exception."""
        return JsonWireException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class JsonWireException(Exception):
    """
    Base exception for all jsonwire errors.

    Carries structured error information and can be converted
    to/from JsonWireError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "JSONWIRE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> JsonWireError:
        """Convert this exception to a JsonWireError model."""
        return JsonWireError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConfigException(JsonWireException):
    """Raised when a configuration argument is invalid."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if setting:
            full_details["setting"] = setting
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=full_details,
        )


class EncodeException(JsonWireException):
    """Raised when a request body cannot be serialized to JSON."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ENCODE_ERROR,
            details=details,
        )


class TransportException(JsonWireException):
    """Raised when a request could not be completed (DNS, connect, read, timeout)."""

    def __init__(
        self,
        message: str,
        method: str | None = None,
        url: str | None = None,
        timed_out: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if method:
            full_details["method"] = method
        if url:
            full_details["url"] = url
        super().__init__(
            message=message,
            code=ErrorCodes.TRANSPORT_TIMEOUT if timed_out else ErrorCodes.TRANSPORT_ERROR,
            details=full_details,
        )
        self.method = method
        self.url = url
        self.timed_out = timed_out


class DecodeException(JsonWireException):
    """Raised when a response body cannot be decoded into the expected shape."""

    def __init__(
        self,
        message: str,
        shape: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if shape:
            full_details["shape"] = shape
        super().__init__(
            message=message,
            code=ErrorCodes.DECODE_ERROR,
            details=full_details,
        )


class ApiStatusException(JsonWireException):
    """
    Raised on request by callers that want a non-200 envelope as an exception.

    The request pipeline never raises this itself; non-200 responses are
    valid outcomes. See ``ApiResponse.raise_for_status``.
    """

    def __init__(
        self,
        message: str,
        status: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["status"] = status
        super().__init__(
            message=message,
            code=ErrorCodes.API_ERROR,
            details=full_details,
        )
        self.status = status
