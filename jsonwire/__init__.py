"""
jsonwire

Client-side request/response layer for JSON HTTP APIs: one shared
transport, typed decoding, exact-200 classification and normalized
failure envelopes.
"""

from .config import ClientConfig, HttpConfig, get_default_config, set_default_config
from .http import (
    ApiClient,
    DebugSink,
    MockTransport,
    RequestsTransport,
    Transport,
    TransportHandle,
    TransportResponse,
    create_client,
    create_transport,
)
from .schemas import (
    ApiError,
    ApiResponse,
    ApiStatusException,
    ConfigException,
    DecodedValue,
    DecodeError,
    DecodeException,
    EncodeException,
    JsonWireException,
    Outcome,
    TransportError,
    TransportException,
)

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "create_client",
    "TransportHandle",
    "Transport",
    "TransportResponse",
    "RequestsTransport",
    "MockTransport",
    "create_transport",
    "DebugSink",
    "ClientConfig",
    "HttpConfig",
    "get_default_config",
    "set_default_config",
    "ApiResponse",
    "Outcome",
    "DecodedValue",
    "ApiError",
    "TransportError",
    "DecodeError",
    "JsonWireException",
    "ConfigException",
    "EncodeException",
    "TransportException",
    "DecodeException",
    "ApiStatusException",
]
