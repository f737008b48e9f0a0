"""Adapters - I/O implementations of ports."""

from .json_store import JsonEventStore, StoreError
from .console import ClickLineReader

__all__ = [
    "JsonEventStore",
    "StoreError",
    "ClickLineReader",
]
