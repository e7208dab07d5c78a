"""
Transport Handle

One long-lived transport plus its default request configuration,
shared by every call a client makes.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional
from urllib.parse import urljoin, urlsplit

from requests.structures import CaseInsensitiveDict

from jsonwire.schemas.errors import ConfigException

from .transport import Transport, TransportResponse, create_transport

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def _frozen_headers(headers: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(CaseInsensitiveDict(headers))


@dataclass(frozen=True)
class TransportSettings:
    """
    Immutable snapshot of the handle's defaults.

    A new snapshot is published on every configuration change; a call
    reads one snapshot and uses it for its whole lifetime.
    """
    headers: Mapping[str, str] = field(default_factory=lambda: _frozen_headers({}))
    authorization: Optional[str] = None
    timeout: Optional[float] = None
    base_url: Optional[str] = None


class TransportHandle:
    """
    Shared transport with default headers, authorization and timeout.

    Create one per client and keep it for the process lifetime; building
    a new one per call forfeits connection reuse.

    Usage:
        handle = TransportHandle()
        handle.configure_default_header("Accept", "application/json")
        handle.configure_authorization("Bearer", "abc123")
        handle.configure_timeout(10)
    """

    def __init__(self, transport: Optional[Transport] = None) -> None:
        self.transport = transport or create_transport("requests")
        self._settings = TransportSettings()
        self._lock = threading.Lock()

    def snapshot(self) -> TransportSettings:
        """Current settings. Safe to read without the lock."""
        return self._settings

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure_default_header(self, name: str, value: str) -> "TransportHandle":
        """Set (or replace) a header sent with every request."""
        if not name or not name.strip():
            raise ConfigException("Header name must not be empty", setting="header")
        name = name.strip()
        with self._lock:
            headers = CaseInsensitiveDict(self._settings.headers)
            headers[name] = value
            self._settings = replace(self._settings, headers=_frozen_headers(headers))
        return self

    def remove_default_header(self, name: str) -> "TransportHandle":
        with self._lock:
            headers = CaseInsensitiveDict(self._settings.headers)
            headers.pop(name, None)
            self._settings = replace(self._settings, headers=_frozen_headers(headers))
        return self

    def configure_authorization(self, scheme: str, token: str = "") -> "TransportHandle":
        """
        Set the default Authorization header.

        Args:
            scheme: For eg,. "Bearer". May carry the whole credential
                ("Bearer abc123") when token is empty.
            token: For eg,. "abc123"
        """
        if not scheme or not scheme.strip():
            raise ConfigException("Authorization scheme must not be empty", setting="authorization")
        value = f"{scheme.strip()} {token}" if token else scheme.strip()
        with self._lock:
            self._settings = replace(self._settings, authorization=value)
        return self

    def clear_authorization(self) -> "TransportHandle":
        with self._lock:
            self._settings = replace(self._settings, authorization=None)
        return self

    def configure_timeout(self, seconds: float) -> "TransportHandle":
        """Set the per-call timeout (connect + read) in seconds."""
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise ConfigException(f"Timeout must be a number, got {seconds!r}", setting="timeout")
        if math.isnan(seconds) or seconds <= 0:
            raise ConfigException(f"Timeout must be positive, got {seconds!r}", setting="timeout")
        with self._lock:
            self._settings = replace(self._settings, timeout=float(seconds))
        return self

    def configure_base_url(self, base_url: Optional[str]) -> "TransportHandle":
        """Base used to resolve relative request URLs. None disables it."""
        if base_url is not None:
            parts = urlsplit(base_url)
            if not parts.scheme or not parts.netloc:
                raise ConfigException(f"Base URL must be absolute, got {base_url!r}", setting="base_url")
            if not base_url.endswith("/"):
                base_url += "/"
        with self._lock:
            self._settings = replace(self._settings, base_url=base_url)
        return self

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    @staticmethod
    def build_headers(
        settings: TransportSettings,
        content_type: Optional[str] = None,
    ) -> dict[str, str]:
        """Fresh header dict for one request, built from a snapshot."""
        headers = dict(settings.headers.items())
        if settings.authorization is not None:
            headers = {k: v for k, v in headers.items() if k.lower() != "authorization"}
            headers["Authorization"] = settings.authorization
        if content_type:
            headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
            headers["Content-Type"] = content_type
        return headers

    @staticmethod
    def resolve_url(settings: TransportSettings, url: str) -> str:
        if settings.base_url and not urlsplit(url).scheme:
            return urljoin(settings.base_url, url.lstrip("/"))
        return url

    def send(
        self,
        method: str,
        url: str,
        body: Optional[bytes] = None,
        *,
        content_type: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> TransportResponse:
        """
        Dispatch one request using the current snapshot.

        Raises:
            TransportException: If the transport could not complete the call.
        """
        settings = self.snapshot()
        headers = self.build_headers(settings, content_type)
        target = self.resolve_url(settings, url)
        effective_timeout = timeout if timeout is not None else settings.timeout
        logger.debug(f"Dispatching {method} {target} via {self.transport.name}")
        return self.transport.send(
            method,
            target,
            headers=headers,
            body=body,
            timeout=effective_timeout,
        )

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "TransportHandle":
        return self

    def __exit__(self, *args) -> None:
        self.close()
