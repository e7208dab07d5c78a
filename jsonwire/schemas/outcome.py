"""
Outcome of one pipeline invocation.

Each request resolves to exactly one of the variants below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from .errors import DecodeException, EncodeException, TransportException

T = TypeVar("T")


@dataclass(frozen=True)
class DecodedValue(Generic[T]):
    """200 response whose body decoded into the requested shape."""
    value: T
    status_code: int = 200


@dataclass(frozen=True)
class ApiError:
    """Any non-200 response. Not a fault; the peer answered."""
    status_code: int
    message: str


@dataclass(frozen=True)
class TransportError:
    """Request never produced a response (DNS, connect, read, timeout)."""
    message: str
    error: TransportException
    timed_out: bool = False


@dataclass(frozen=True)
class DecodeError:
    """
    Body could not be turned into the requested shape.

    Also used for request bodies that could not be encoded; those were
    never sent, so ``status_code`` stays 0.
    """
    message: str
    error: Union[DecodeException, EncodeException]
    status_code: int = 0


Outcome = Union[DecodedValue[Any], ApiError, TransportError, DecodeError]


def is_success(outcome: Outcome) -> bool:
    return isinstance(outcome, DecodedValue)


def outcome_error(outcome: Outcome) -> Optional[Exception]:
    """Underlying exception for infrastructure failures, else None."""
    if isinstance(outcome, (TransportError, DecodeError)):
        return outcome.error
    return None
