"""
HTTP Client Module

Shared transport handle and the JSON request pipeline on top of it.
"""

from .client import ApiClient, create_client
from .debug import DebugSink
from .handle import TransportHandle, TransportSettings
from .transport import (
    MockTransport,
    RequestsTransport,
    Transport,
    TransportResponse,
    create_transport,
)

__all__ = [
    "ApiClient",
    "create_client",
    "DebugSink",
    "TransportHandle",
    "TransportSettings",
    "Transport",
    "TransportResponse",
    "RequestsTransport",
    "MockTransport",
    "create_transport",
]
