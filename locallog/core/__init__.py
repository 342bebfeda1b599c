"""
Core storage for local log entries.

This package provides:
- The entry model and its JSON encoding
- A time-ordered in-memory index
- A file-per-entry durable store with crash recovery
- A once-a-day purge policy
"""

from locallog.core.entry import Level, LogEntry
from locallog.core.index import SortedIndex
from locallog.core.marker import PurgeMarker
from locallog.core.purge import PurgePolicy, PurgeState
from locallog.core.store import (
    InvalidLimitError,
    LocalLogError,
    LocalStore,
    NoStorageError,
    NoSuchLogEntryError,
    NullStore,
    StoreInitializationError,
)

__all__ = [
    "InvalidLimitError",
    "Level",
    "LocalLogError",
    "LocalStore",
    "LogEntry",
    "NoStorageError",
    "NoSuchLogEntryError",
    "NullStore",
    "PurgeMarker",
    "PurgePolicy",
    "PurgeState",
    "SortedIndex",
    "StoreInitializationError",
]
