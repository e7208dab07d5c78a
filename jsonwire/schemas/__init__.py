"""
Schemas

Error taxonomy, pipeline outcomes and the response envelope.
"""

from .errors import (
    ApiStatusException,
    ConfigException,
    DecodeException,
    EncodeException,
    ErrorCodes,
    JsonWireError,
    JsonWireException,
    TransportException,
)
from .outcome import (
    ApiError,
    DecodedValue,
    DecodeError,
    Outcome,
    TransportError,
    is_success,
    outcome_error,
)
from .response import STATUS_UNKNOWN, ApiResponse

__all__ = [
    # Errors
    "ErrorCodes",
    "JsonWireError",
    "JsonWireException",
    "ConfigException",
    "EncodeException",
    "TransportException",
    "DecodeException",
    "ApiStatusException",
    # Outcomes
    "Outcome",
    "DecodedValue",
    "ApiError",
    "TransportError",
    "DecodeError",
    "is_success",
    "outcome_error",
    # Envelope
    "ApiResponse",
    "STATUS_UNKNOWN",
]
