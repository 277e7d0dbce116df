"""Persistence for session logs."""

from .key_value_store import JsonKeyValueStore
from .log_storage import LogStorage

__all__ = [
    "JsonKeyValueStore",
    "LogStorage",
]
