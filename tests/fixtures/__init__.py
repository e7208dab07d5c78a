"""
Test fixtures package for jsonwire tests.

Usage:
    from fixtures import Thing, make_client

    def test_something():
        client = make_client()
        thing = client.get("/ok", Thing)
"""

from .common import (
    StrictThing,
    Thing,
    json_response,
    make_client,
    make_transport,
)

__all__ = [
    "Thing",
    "StrictThing",
    "make_transport",
    "make_client",
    "json_response",
]
