"""Test fixtures package."""

from .fake_dbapi import FakeConnection, FakeCursor, FakeDriverError, FakeIntrospector, column

__all__ = [
    "FakeConnection",
    "FakeCursor",
    "FakeDriverError",
    "FakeIntrospector",
    "column",
]
