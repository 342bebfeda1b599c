"""
Leveled logging facade.

A Log stamps each message with a fresh identifier and the current UTC time,
hands the entry to a store and optionally mirrors it to a display.

Usage:
    log = new_local_log("./logs", print_to_stdout=True)
    entry = log.info("server listening on port ", 8080)
    recent = log.get(before=utc_now(), level=Level.ANY, limit=20)
    log.close()
"""

from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Protocol, Union

from locallog.core.entry import Level, LogEntry
from locallog.core.store import LocalStore, NullStore
from locallog.display.console import ConsoleDisplay
from locallog.utils.config import Config
from locallog.utils.logging import get_logger

logger = get_logger(__name__)


class EntryStore(Protocol):
    """Write and query operations a Log delegates to."""
    
    def put(self, entry: LogEntry) -> None: ...
    
    def get_by_id(self, log_id: str) -> LogEntry: ...
    
    def get(self, before: datetime, level: Level, limit: int) -> List[LogEntry]: ...
    
    def close(self) -> None: ...


def format_message(*args: Any) -> str:
    """
    Join arguments into one message.
    
    A space is added between two adjacent arguments only when neither of them
    is a string.
    """
    parts: List[str] = []
    previous_is_str = True
    
    for i, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if i > 0 and not is_str and not previous_is_str:
            parts.append(" ")
        parts.append(str(arg))
        previous_is_str = is_str
    
    return "".join(parts)


class Log:
    """
    Leveled logger backed by an entry store.
    
    Attributes:
        store: Where entries are persisted and queried
        display: Optional sink that entries are mirrored to
    """
    
    def __init__(
        self,
        store: EntryStore,
        display: Optional[ConsoleDisplay] = None,
        owns_display: bool = False,
    ):
        """
        Initialize a log.
        
        Args:
            store: Entry store
            display: Optional display sink
            owns_display: Stop the display when this log is closed
        """
        self.store = store
        self.display = display
        self._owns_display = owns_display
    
    def _log(self, level: Level, *args: Any) -> LogEntry:
        entry = LogEntry.create(level, format_message(*args))
        self.store.put(entry)
        
        if self.display is not None:
            self.display.submit(entry)
        
        return entry
    
    def info(self, *args: Any) -> LogEntry:
        return self._log(Level.INFO, *args)
    
    def warning(self, *args: Any) -> LogEntry:
        return self._log(Level.WARNING, *args)
    
    def error(self, *args: Any) -> LogEntry:
        return self._log(Level.ERROR, *args)
    
    def critical(self, *args: Any) -> LogEntry:
        return self._log(Level.CRITICAL, *args)
    
    def get_by_id(self, log_id: str) -> LogEntry:
        return self.store.get_by_id(log_id)
    
    def get(self, before: datetime, level: Level, limit: int) -> List[LogEntry]:
        return self.store.get(before, level, limit)
    
    def close(self) -> None:
        """Stop an owned display, then close the store."""
        if self._owns_display and self.display is not None:
            self.display.stop()
        self.store.close()
    
    def __enter__(self) -> "Log":
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
    
    @classmethod
    def from_config(cls, config: Config) -> "Log":
        """
        Build a local log from configuration.
        
        Uses ``store.directory``, ``display.enabled`` and
        ``display.line_spacing``.
        """
        return new_local_log(
            store_dir=config.get("store.directory"),
            print_to_stdout=bool(config.get("display.enabled", False)),
            line_spacing=int(config.get("display.line_spacing", 0)),
        )


def _build(
    store: EntryStore,
    print_to_stdout: bool,
    line_spacing: int,
    display: Optional[ConsoleDisplay],
) -> Log:
    if not print_to_stdout:
        return Log(store)
    
    if display is not None:
        return Log(store, display=display)
    
    owned = ConsoleDisplay(line_spacing=line_spacing)
    owned.start()
    return Log(store, display=owned, owns_display=True)


def new_local_log(
    store_dir: Union[str, Path],
    print_to_stdout: bool = False,
    line_spacing: int = 0,
    display: Optional[ConsoleDisplay] = None,
) -> Log:
    """
    Create a log persisted to ``store_dir``.
    
    Stored entries are purged the first time the log is used on a new UTC
    date.
    
    Args:
        store_dir: Store directory, created if absent
        print_to_stdout: Mirror entries to a console display
        line_spacing: Blank lines after each displayed entry
        display: Display to mirror to instead of creating one; the caller
            keeps ownership
    
    Raises:
        StoreInitializationError: If the directory cannot be created
    """
    store = LocalStore(Path(store_dir))
    return _build(store, print_to_stdout, line_spacing, display)


def new_console_log(line_spacing: int = 0, display: Optional[ConsoleDisplay] = None) -> Log:
    """Create a log that prints entries and keeps no history."""
    return _build(NullStore(), True, line_spacing, display)


def new_dev_null_log() -> Log:
    """Create a log that neither prints nor stores entries."""
    return Log(NullStore())
