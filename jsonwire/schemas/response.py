"""
Normalized response envelope.

Every typed call returns an instance of an ``ApiResponse`` subclass,
whether the request succeeded or not. Callers branch on ``status`` /
``succeeded`` instead of catching exceptions.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .errors import ApiStatusException

# Status used for failures that never produced an HTTP status line
# (transport, encode and decode failures).
STATUS_UNKNOWN = 0


class ApiResponse(BaseModel):
    """
    Base class for typed API results.

    Subclass it with the payload fields of an endpoint:

        class Thing(ApiResponse):
            id: int = 0
            name: str = ""

        thing = client.get("/things/7", Thing)
        if thing.succeeded:
            print(thing.id)
        else:
            print(thing.status, thing.message)
    """

    model_config = ConfigDict(extra="ignore")

    status: int = Field(
        default=STATUS_UNKNOWN,
        description="HTTP status code, or 0 when no response was received",
    )
    message: Optional[str] = Field(
        default=None,
        description="Reason phrase or normalized failure text",
    )

    _succeeded: bool = PrivateAttr(default=False)

    @property
    def succeeded(self) -> bool:
        """True when this envelope wraps a decoded 200 response."""
        return self._succeeded

    @property
    def failed(self) -> bool:
        return not self._succeeded

    @classmethod
    def failure(cls, status: int, message: Optional[str]):
        """
        Build a failure-shaped instance of this class.

        Payload fields are not validated; those with defaults keep them,
        required ones stay unset.
        """
        return cls.model_construct(status=status, message=message)

    def mark_succeeded(self, status: int) -> None:
        """Flag a freshly decoded envelope as a success."""
        self._succeeded = True
        if "status" not in self.model_fields_set:
            self.status = status

    def raise_for_status(self) -> None:
        """Raise ApiStatusException if this envelope is a failure."""
        if not self._succeeded:
            raise ApiStatusException(
                self.message or f"HTTP {self.status}",
                status=self.status,
            )
