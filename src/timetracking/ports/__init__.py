"""Ports - interfaces/protocols for external dependencies."""

from .event_store import EventStore
from .line_reader import LineReader

__all__ = [
    "EventStore",
    "LineReader",
]
