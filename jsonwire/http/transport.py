"""
HTTP Transport

The wire-level layer under the request pipeline:
- RequestsTransport (pooled requests.Session)
- MockTransport (canned responses, for testing)
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Callable, Optional, Union

from jsonwire.schemas.errors import TransportException

logger = logging.getLogger(__name__)


def _is_read_timeout(error: BaseException) -> bool:
    """
    True for a timeout hit while reading the body.

    requests raises those as ConnectionError wrapping urllib3's
    ReadTimeoutError rather than as requests.Timeout.
    """
    from urllib3.exceptions import ReadTimeoutError

    wrapped = error.args[0] if error.args else None
    return isinstance(wrapped, ReadTimeoutError) or isinstance(error.__context__, ReadTimeoutError)


def default_reason(status_code: int) -> str:
    """Standard reason phrase for a status code, or "" if unknown."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


@dataclass
class TransportResponse:
    """
    Response from the transport, body fully read.
    """
    status_code: int
    content: bytes = b""
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def is_success(self) -> bool:
        """Exactly 200. Other 2xx codes are not treated as success."""
        return self.status_code == 200

    @property
    def reason_phrase(self) -> str:
        """Reason from the status line, falling back to the standard phrase."""
        return self.reason or default_reason(self.status_code)

    @property
    def text(self) -> str:
        """Get response content as text."""
        return self.content.decode("utf-8", errors="replace")


class Transport(ABC):
    """
    Abstract base class for transports.

    Implementations must tolerate concurrent ``send`` calls from many
    threads and must not keep per-request state between calls.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        body: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> TransportResponse:
        """
        Send one request and read the whole response.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute request URL
            headers: Complete header set for this request
            body: Encoded request body
            timeout: Connect/read timeout in seconds

        Returns:
            TransportResponse with status, reason, and content

        Raises:
            TransportException: If no response could be obtained.
        """
        ...

    def close(self) -> None:
        """Release pooled connections."""


class RequestsTransport(Transport):
    """
    Transport backed by one shared ``requests.Session``.

    The session's connection pool is reused across all calls. Headers are
    passed per request; the session's own header dict is never touched
    after creation.
    """

    def __init__(self, *, proxy: Optional[str] = None) -> None:
        self.proxy = proxy
        self._session = None
        self._session_lock = threading.Lock()

    @property
    def name(self) -> str:
        return "requests"

    def _get_session(self):
        """Lazy-load requests session."""
        if self._session is None:
            with self._session_lock:
                if self._session is None:
                    import requests

                    session = requests.Session()
                    if self.proxy:
                        session.proxies = {
                            "http": self.proxy,
                            "https": self.proxy,
                        }
                    self._session = session
        return self._session

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        body: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> TransportResponse:
        import requests

        session = self._get_session()
        try:
            response = session.request(
                method=method,
                url=url,
                headers=headers,
                data=body,
                timeout=timeout,
            )
            logger.debug(f"{method} {url} -> {response.status_code}")
            return TransportResponse(
                status_code=response.status_code,
                content=response.content,
                reason=response.reason or "",
                headers=dict(response.headers),
                url=str(response.url),
                elapsed_ms=response.elapsed.total_seconds() * 1000,
            )
        except requests.RequestException as e:
            if isinstance(e, requests.Timeout) or _is_read_timeout(e):
                raise TransportException(
                    f"Request timed out after {timeout}s: {e}",
                    method=method,
                    url=url,
                    timed_out=True,
                ) from e
            raise TransportException(str(e), method=method, url=url) from e

    def close(self) -> None:
        """Close the HTTP session."""
        with self._session_lock:
            if self._session is not None:
                self._session.close()
                self._session = None


MockRoute = Union[
    TransportResponse,
    Exception,
    Callable[[str, str, dict[str, str], Optional[bytes]], TransportResponse],
]


class MockTransport(Transport):
    """
    Transport serving canned responses, for testing.

    Routes are keyed by ``(METHOD, url)``. A route may be a
    TransportResponse, an exception to raise, or a callable
    ``(method, url, headers, body) -> TransportResponse``.
    Unrouted requests get a 404.
    """

    def __init__(self, routes: Optional[dict[tuple[str, str], MockRoute]] = None) -> None:
        self._routes: dict[tuple[str, str], MockRoute] = {}
        for (method, url), route in (routes or {}).items():
            self._routes[(method.upper(), url)] = route
        self._calls: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "mock"

    @property
    def calls(self) -> list[dict[str, Any]]:
        """Get all recorded calls."""
        with self._lock:
            return list(self._calls)

    def add(
        self,
        method: str,
        url: str,
        *,
        status: int = 200,
        body: Union[str, bytes] = b"",
        reason: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> "MockTransport":
        """Register a canned response."""
        content = body.encode("utf-8") if isinstance(body, str) else body
        self._routes[(method.upper(), url)] = TransportResponse(
            status_code=status,
            content=content,
            reason=default_reason(status) if reason is None else reason,
            headers=headers or {},
            url=url,
        )
        return self

    def add_error(self, method: str, url: str, error: Exception) -> "MockTransport":
        """Register an exception raised when the route is hit."""
        self._routes[(method.upper(), url)] = error
        return self

    def add_handler(
        self,
        method: str,
        url: str,
        handler: Callable[[str, str, dict[str, str], Optional[bytes]], TransportResponse],
    ) -> "MockTransport":
        """Register a callable producing the response."""
        self._routes[(method.upper(), url)] = handler
        return self

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        body: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> TransportResponse:
        method = method.upper()
        with self._lock:
            self._calls.append({
                "method": method,
                "url": url,
                "headers": dict(headers),
                "body": body,
                "timeout": timeout,
            })

        route = self._routes.get((method, url))
        if route is None:
            return TransportResponse(status_code=404, reason="Not Found", url=url)
        if isinstance(route, TransportException):
            raise route
        if isinstance(route, Exception):
            raise TransportException(str(route), method=method, url=url) from route
        if isinstance(route, TransportResponse):
            return route
        return route(method, url, dict(headers), body)


def create_transport(kind: str = "requests", **kwargs: Any) -> Transport:
    """
    Factory function to create a transport.

    Args:
        kind: Transport name (requests, mock)
        **kwargs: Transport-specific arguments

    Returns:
        Transport instance
    """
    kind = kind.lower()
    if kind == "requests":
        return RequestsTransport(**kwargs)
    elif kind == "mock":
        return MockTransport(**kwargs)
    else:
        raise ValueError(f"Unknown transport: {kind}")
