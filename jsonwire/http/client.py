"""
JSON API Client

Request pipeline over a shared TransportHandle. Every call resolves to one
Outcome; the public entry points fold that Outcome into the shape the
caller asked for.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, TypeVar, Union

from jsonwire.schemas.errors import (
    DecodeException,
    EncodeException,
    TransportException,
)
from jsonwire.schemas.outcome import (
    ApiError,
    DecodedValue,
    DecodeError,
    Outcome,
    TransportError,
    is_success,
    outcome_error,
)
from jsonwire.schemas.response import STATUS_UNKNOWN, ApiResponse

from . import codec
from .debug import DebugSink
from .handle import JSON_CONTENT_TYPE, TransportHandle
from .transport import Transport, TransportResponse, create_transport

if TYPE_CHECKING:
    from jsonwire.config import ClientConfig


R = TypeVar("R", bound=ApiResponse)
T = TypeVar("T")

# Failure text shown when debug is off. Underlying error text is only
# surfaced with debug enabled.
MSG_TIMEOUT = "Request timed out"
MSG_TRANSPORT = "Request failed"
MSG_ENCODE = "Request body could not be encoded"
MSG_DECODE = "Response could not be decoded"


class ApiClient:
    """
    Client for JSON HTTP APIs.

    One instance owns one TransportHandle and is safe to share across
    threads.

    Usage:
        client = ApiClient()
        client.configure_default_header("Accept", "application/json")

        thing = client.get("https://api.example.com/things/7", Thing)
        if thing.succeeded:
            print(thing.id)

        raw = client.get_for_type("https://api.example.com/things", list[dict])
        text = client.get_for_text("https://api.example.com/health")
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        *,
        handle: Optional[TransportHandle] = None,
        debug_sink: Optional[DebugSink] = None,
    ) -> None:
        if handle is not None and transport is not None:
            raise ValueError("Pass either transport or handle, not both")
        self._handle = handle or TransportHandle(transport)
        self._debug = debug_sink or DebugSink(enabled=False)

    @classmethod
    def from_config(
        cls,
        config: "ClientConfig",
        *,
        transport: Optional[Transport] = None,
    ) -> "ApiClient":
        """Build a client with defaults taken from a ClientConfig."""
        http = config.http
        handle = TransportHandle(transport or create_transport("requests", proxy=config.proxy))
        handle.configure_timeout(http.timeout)
        if http.base_url:
            handle.configure_base_url(http.base_url)
        if http.user_agent:
            handle.configure_default_header("User-Agent", http.user_agent)
        for name, value in http.default_headers.items():
            handle.configure_default_header(name, value)
        if http.auth_scheme:
            handle.configure_authorization(http.auth_scheme, http.auth_token or "")
        return cls(handle=handle, debug_sink=DebugSink(enabled=config.debug))

    @property
    def handle(self) -> TransportHandle:
        return self._handle

    @property
    def debug_sink(self) -> DebugSink:
        return self._debug

    # ------------------------------------------------------------------
    # Configuration (delegates to the handle)
    # ------------------------------------------------------------------

    def configure_default_header(self, name: str, value: str) -> "ApiClient":
        self._handle.configure_default_header(name, value)
        return self

    def configure_authorization(self, scheme: str, token: str = "") -> "ApiClient":
        self._handle.configure_authorization(scheme, token)
        return self

    def clear_authorization(self) -> "ApiClient":
        self._handle.clear_authorization()
        return self

    def configure_timeout(self, seconds: float) -> "ApiClient":
        self._handle.configure_timeout(seconds)
        return self

    def configure_base_url(self, base_url: Optional[str]) -> "ApiClient":
        self._handle.configure_base_url(base_url)
        return self

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _warn(self, context: str, message: str) -> None:
        if self._debug.is_debug_enabled():
            self._debug.warn(context, message)

    def _send(
        self,
        verb: str,
        url: str,
        body: Any,
        timeout: Optional[float],
        context: str,
    ) -> Union[TransportResponse, TransportError, DecodeError]:
        """Encode, dispatch and read. Returns the response or a terminal outcome."""
        payload = None
        content_type = None
        if body is not None:
            try:
                payload = codec.encode(body).encode("utf-8")
            except EncodeException as e:
                self._warn(context, f"Error when encoding body for {verb} {url} ! error: {e}")
                return DecodeError(message=str(e), error=e)
            content_type = JSON_CONTENT_TYPE

        try:
            return self._handle.send(
                verb,
                url,
                payload,
                content_type=content_type,
                timeout=timeout,
            )
        except TransportException as e:
            self._warn(context, f"Error when {verb} {url} ! error: {e}")
            return TransportError(message=str(e), error=e, timed_out=e.timed_out)
        except Exception as e:
            # custom transports may leak their own exception types
            wrapped = TransportException(str(e) or type(e).__name__, method=verb, url=url)
            wrapped.__cause__ = e
            self._warn(context, f"Error when {verb} {url} ! error: {wrapped}")
            return TransportError(message=wrapped.message, error=wrapped)

    def _classify(self, response: TransportResponse, verb: str, url: str, context: str) -> Optional[ApiError]:
        """None for exactly 200, ApiError for everything else."""
        if response.is_success:
            return None
        reason = response.reason_phrase
        self._warn(context, f"NG response ({response.status_code}) when {verb} {url}, reason: {reason}")
        return ApiError(status_code=response.status_code, message=reason)

    def execute(
        self,
        verb: str,
        url: str,
        shape: Any,
        body: Any = None,
        *,
        timeout: Optional[float] = None,
        context: str = "execute",
    ) -> Outcome:
        """
        Run one request and return its Outcome. Never raises for request
        failures.

        Args:
            verb: HTTP method (GET, POST, etc.)
            url: Absolute URL, or relative to the configured base URL
            shape: Type the 200 body is decoded into
            body: JSON-serializable request body, or None for no body
            timeout: Per-call timeout overriding the handle's

        Raises:
            TypeError: If ``shape`` cannot be decoded into. Checked before
                anything is sent.
        """
        codec.check_shape(shape)
        verb = verb.upper()
        sent = self._send(verb, url, body, timeout, context)
        if not isinstance(sent, TransportResponse):
            return sent

        api_error = self._classify(sent, verb, url, context)
        if api_error is not None:
            return api_error

        try:
            value = codec.decode(sent.content, shape)
        except DecodeException as e:
            self._warn(context, f"Error when decoding {verb} {url} ! error: {e}")
            return DecodeError(message=str(e), error=e, status_code=sent.status_code)
        return DecodedValue(value=value, status_code=sent.status_code)

    def _failure_message(self, outcome: Union[TransportError, DecodeError]) -> str:
        if self._debug.is_debug_enabled():
            return outcome.message
        if isinstance(outcome, TransportError):
            return MSG_TIMEOUT if outcome.timed_out else MSG_TRANSPORT
        if isinstance(outcome.error, EncodeException):
            return MSG_ENCODE
        return MSG_DECODE

    def _to_envelope(self, outcome: Outcome, response_type: type[R]) -> R:
        if isinstance(outcome, DecodedValue):
            result = outcome.value
            result.mark_succeeded(outcome.status_code)
            return result
        if isinstance(outcome, ApiError):
            return response_type.failure(outcome.status_code, outcome.message)
        return response_type.failure(STATUS_UNKNOWN, self._failure_message(outcome))

    @staticmethod
    def _check_response_type(response_type: Any) -> None:
        if not (isinstance(response_type, type) and issubclass(response_type, ApiResponse)):
            raise TypeError(
                f"response_type must be an ApiResponse subclass, got {response_type!r}"
            )

    def execute_typed(
        self,
        verb: str,
        url: str,
        response_type: type[R],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> R:
        """
        Send a request and return a ``response_type`` envelope.

        Success gives the decoded body; any failure gives
        ``response_type.failure(status, message)``. Never raises for
        request failures.
        """
        self._check_response_type(response_type)
        outcome = self.execute(verb, url, response_type, body, timeout=timeout, context="execute_typed")
        return self._to_envelope(outcome, response_type)

    def execute_typed_or_throw(
        self,
        verb: str,
        url: str,
        response_type: type[R],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> R:
        """
        Like execute_typed, but encode, transport and decode failures raise.

        Non-200 responses still come back as a failure envelope.

        Raises:
            EncodeException: Body could not be serialized (nothing was sent).
            TransportException: No response was received.
            DecodeException: 200 body did not match ``response_type``.
        """
        self._check_response_type(response_type)
        outcome = self.execute(verb, url, response_type, body, timeout=timeout, context="execute_typed_or_throw")
        error = outcome_error(outcome)
        if error is not None:
            raise error
        return self._to_envelope(outcome, response_type)

    def execute_raw(
        self,
        verb: str,
        url: str,
        shape: type[T],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[T]:
        """
        Decoded body on a 200, None on any failure.

        A ``shape`` pydantic cannot build a schema for raises TypeError
        before the request is sent.
        """
        outcome = self.execute(verb, url, shape, body, timeout=timeout, context="execute_raw")
        if not is_success(outcome):
            return None
        if isinstance(outcome.value, ApiResponse):
            outcome.value.mark_succeeded(outcome.status_code)
        return outcome.value

    def _execute_body(
        self,
        verb: str,
        url: str,
        body: Any,
        timeout: Optional[float],
        context: str,
    ) -> Optional[TransportResponse]:
        verb = verb.upper()
        sent = self._send(verb, url, body, timeout, context)
        if not isinstance(sent, TransportResponse):
            return None
        if self._classify(sent, verb, url, context) is not None:
            return None
        return sent

    def execute_for_text(
        self,
        verb: str,
        url: str,
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """Body text on a 200, None on any failure. Never JSON-decodes."""
        response = self._execute_body(verb, url, body, timeout, "execute_for_text")
        return response.text if response is not None else None

    def execute_for_bytes(
        self,
        verb: str,
        url: str,
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[bytes]:
        """Body bytes on a 200, None on any failure."""
        response = self._execute_body(verb, url, body, timeout, "execute_for_bytes")
        return response.content if response is not None else None

    # ------------------------------------------------------------------
    # Verb-bound wrappers
    # ------------------------------------------------------------------

    def get(self, url: str, response_type: type[R], *, timeout: Optional[float] = None) -> R:
        """Send a GET request and return a typed envelope."""
        return self.execute_typed("GET", url, response_type, timeout=timeout)

    def get_for_type(self, url: str, shape: type[T], *, timeout: Optional[float] = None) -> Optional[T]:
        """Send a GET request and return the decoded body, or None."""
        return self.execute_raw("GET", url, shape, timeout=timeout)

    def get_for_text(self, url: str, *, timeout: Optional[float] = None) -> Optional[str]:
        return self.execute_for_text("GET", url, timeout=timeout)

    def get_for_bytes(self, url: str, *, timeout: Optional[float] = None) -> Optional[bytes]:
        return self.execute_for_bytes("GET", url, timeout=timeout)

    def get_or_throw(self, url: str, response_type: type[R], *, timeout: Optional[float] = None) -> R:
        return self.execute_typed_or_throw("GET", url, response_type, timeout=timeout)

    def post(
        self,
        url: str,
        response_type: type[R],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> R:
        """Send a POST request with a JSON body and return a typed envelope."""
        return self.execute_typed("POST", url, response_type, body, timeout=timeout)

    def post_for_type(
        self,
        url: str,
        shape: type[T],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[T]:
        return self.execute_raw("POST", url, shape, body, timeout=timeout)

    def post_for_text(self, url: str, body: Any = None, *, timeout: Optional[float] = None) -> Optional[str]:
        return self.execute_for_text("POST", url, body, timeout=timeout)

    def post_for_bytes(self, url: str, body: Any = None, *, timeout: Optional[float] = None) -> Optional[bytes]:
        return self.execute_for_bytes("POST", url, body, timeout=timeout)

    def post_or_throw(
        self,
        url: str,
        response_type: type[R],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> R:
        return self.execute_typed_or_throw("POST", url, response_type, body, timeout=timeout)

    def put(
        self,
        url: str,
        response_type: type[R],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> R:
        return self.execute_typed("PUT", url, response_type, body, timeout=timeout)

    def put_or_throw(
        self,
        url: str,
        response_type: type[R],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> R:
        return self.execute_typed_or_throw("PUT", url, response_type, body, timeout=timeout)

    def patch(
        self,
        url: str,
        response_type: type[R],
        body: Any = None,
        *,
        timeout: Optional[float] = None,
    ) -> R:
        return self.execute_typed("PATCH", url, response_type, body, timeout=timeout)

    def delete(self, url: str, response_type: type[R], *, timeout: Optional[float] = None) -> R:
        return self.execute_typed("DELETE", url, response_type, timeout=timeout)

    def delete_or_throw(self, url: str, response_type: type[R], *, timeout: Optional[float] = None) -> R:
        return self.execute_typed_or_throw("DELETE", url, response_type, timeout=timeout)

    def close(self) -> None:
        """Close the underlying transport."""
        self._handle.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def create_client(
    config: Optional["ClientConfig"] = None,
    *,
    transport: Optional[Transport] = None,
) -> ApiClient:
    """
    Convenience function to create an ApiClient.

    Uses the process default configuration when none is given.
    """
    if config is None:
        from jsonwire.config import get_default_config

        config = get_default_config()
    return ApiClient.from_config(config, transport=transport)
