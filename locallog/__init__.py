"""
locallog - an embedded, process-local log entry store.

Entries are persisted one file per entry, indexed by time in memory for fast
range queries, recovered from disk on restart and purged once per UTC day.
Intended for local development sessions rather than long-term retention.
"""

__version__ = "0.1.0"

from locallog.core import (
    InvalidLimitError,
    Level,
    LocalLogError,
    LocalStore,
    LogEntry,
    NoStorageError,
    NoSuchLogEntryError,
    StoreInitializationError,
)
from locallog.display import ConsoleDisplay
from locallog.log import Log, new_console_log, new_dev_null_log, new_local_log

__all__ = [
    "ConsoleDisplay",
    "InvalidLimitError",
    "Level",
    "LocalLogError",
    "LocalStore",
    "Log",
    "LogEntry",
    "NoStorageError",
    "NoSuchLogEntryError",
    "StoreInitializationError",
    "new_console_log",
    "new_dev_null_log",
    "new_local_log",
]
