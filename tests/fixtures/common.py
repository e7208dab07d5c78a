"""
Common test fixtures shared by all modules.

Provides:
- Response models used as typed result shapes
- Factory functions for mock transports and clients
"""

import json
from typing import Any, Optional

from jsonwire.http import ApiClient, DebugSink, MockTransport, TransportResponse
from jsonwire.schemas import ApiResponse


class Thing(ApiResponse):
    """Typed result with defaulted payload fields."""
    id: int = 0
    name: str = ""


class StrictThing(ApiResponse):
    """Typed result whose payload field is required."""
    id: int


def make_transport(routes: Optional[dict[tuple[str, str], Any]] = None) -> MockTransport:
    """
    MockTransport preloaded with the standard endpoints:

    - GET /ok     -> 200 {"id": 7}
    - GET /fail   -> 403 Forbidden
    - GET /broken -> 200 with a non-JSON body
    """
    transport = MockTransport(routes)
    transport.add("GET", "/ok", body='{"id":7}')
    transport.add("GET", "/fail", status=403, reason="Forbidden")
    transport.add("GET", "/broken", body="<html>oops</html>")
    return transport


def make_client(
    transport: Optional[MockTransport] = None,
    *,
    debug: bool = False,
) -> ApiClient:
    """ApiClient over a MockTransport, with Accept: application/json set."""
    client = ApiClient(
        transport or make_transport(),
        debug_sink=DebugSink(enabled=debug),
    )
    client.configure_default_header("Accept", "application/json")
    return client


def json_response(payload: Any, status: int = 200, reason: str = "OK") -> TransportResponse:
    return TransportResponse(
        status_code=status,
        content=json.dumps(payload).encode("utf-8"),
        reason=reason,
    )
