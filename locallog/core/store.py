"""
Durable local store for log entries.

Each entry is written to its own file named ``<log_id>.json`` and indexed in
memory by time. On startup the index is rebuilt from the directory. All data
is purged the first time the store is used on a new UTC date.
"""

import os
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from locallog.core.entry import Level, LogEntry, utc_now
from locallog.core.index import SortedIndex
from locallog.core.marker import MARKER_FILE_NAME
from locallog.core.purge import ENTRY_FILE_SUFFIX, TEMP_FILE_SUFFIX, PurgePolicy, PurgeState
from locallog.utils.logging import get_logger

logger = get_logger(__name__)


class LocalLogError(Exception):
    """Base class for store errors."""
    pass


class StoreInitializationError(LocalLogError):
    """Raised when the store directory cannot be created."""
    pass


class NoSuchLogEntryError(LocalLogError, LookupError):
    """Raised when no entry exists with the requested identifier."""
    
    def __init__(self, log_id: str):
        super().__init__(f"No such LogEntry exists with id: {log_id}")
        self.log_id = log_id


class InvalidLimitError(LocalLogError, ValueError):
    """Raised when a query limit is not a positive integer."""
    
    def __init__(self, limit: int):
        super().__init__(f"A limit greater than 0 must be passed to get(), got {limit}")
        self.limit = limit


class NoStorageError(LocalLogError):
    """Raised when querying a log that keeps no history."""
    
    def __init__(self) -> None:
        super().__init__("This log only prints entries, it does not store any log data")


class LocalStore:
    """
    File-backed entry store with an in-memory time index.
    
    A single lock serializes every operation touching the index or the purge
    marker. Entry file writes happen inside that lock; a slow filesystem
    therefore stalls every other caller.
    
    Attributes:
        directory: Directory holding entry files and the purge marker
    """
    
    def __init__(
        self,
        directory: Path,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the store and recover existing entries.
        
        Args:
            directory: Store directory, created if absent
            clock: Returns the current UTC time (defaults to the system clock)
        
        Raises:
            StoreInitializationError: If the directory cannot be created
        """
        self.directory = Path(directory)
        
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreInitializationError(
                f"Cannot create store directory {self.directory}: {e}"
            ) from e
        
        self._lock = threading.Lock()
        self._index = SortedIndex()
        self._purge_policy = PurgePolicy(self.directory, clock or utc_now)
        
        recovered, skipped = self._recover_entries()
        
        logger.info(
            "Initialized local store",
            directory=str(self.directory),
            entries=recovered,
            skipped=skipped,
        )
    
    def _entry_path(self, log_id: str) -> Optional[Path]:
        """File path for an entry, or None if the id is not a plain file name."""
        if not log_id or log_id in (".", "..") or "\x00" in log_id:
            return None
        if os.sep in log_id or (os.altsep and os.altsep in log_id):
            return None
        
        path = self.directory / f"{log_id}{ENTRY_FILE_SUFFIX}"
        if path.name == MARKER_FILE_NAME:
            return None
        return path
    
    def _recover_entries(self) -> Tuple[int, int]:
        """
        Rebuild the index from entry files on disk.
        
        Unreadable or malformed files are skipped.
        
        Returns:
            Tuple of (entries recovered, files skipped)
        """
        recovered = 0
        skipped = 0
        
        for path in self.directory.glob(f"*{ENTRY_FILE_SUFFIX}"):
            if path.name == MARKER_FILE_NAME or not path.is_file():
                continue
            
            try:
                entry = LogEntry.deserialize(path.read_bytes())
            except (OSError, ValueError) as e:
                logger.warning(
                    "Skipping unreadable entry file",
                    path=str(path),
                    error=str(e),
                )
                skipped += 1
                continue
            
            self._index.insert(entry)
            recovered += 1
        
        return recovered, skipped
    
    def _purge_if_new_day(self) -> None:
        """Clear all entries if the store was last purged on an earlier date."""
        with self._lock:
            if self._purge_policy.state() is PurgeState.FRESH:
                return
            
            now = self._purge_policy.now()
            cleared = len(self._index)
            
            deleted = self._purge_policy.delete_entry_files()
            self._index.clear()
            self._purge_policy.mark_purged(now)
            
            logger.info(
                "Purged store",
                directory=str(self.directory),
                files_deleted=deleted,
                entries_cleared=cleared,
            )
    
    def _write_entry_file(self, entry: LogEntry) -> bool:
        """
        Write an entry to its own file via a temp file and rename.
        
        Failures are logged, never raised.
        
        Returns:
            True if the file was written
        """
        path = self._entry_path(entry.log_id)
        if path is None:
            logger.warning("Entry id is not a valid file name, not persisted", log_id=entry.log_id)
            return False
        
        tmp_path = path.with_name(path.name + TEMP_FILE_SUFFIX)
        try:
            tmp_path.write_bytes(entry.serialize())
            os.replace(tmp_path, path)
        except OSError as e:
            logger.warning(
                "Failed to persist entry",
                log_id=entry.log_id,
                path=str(path),
                error=str(e),
            )
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.debug("Failed to remove temp file", path=str(tmp_path), error=str(cleanup_error))
            return False
        
        return True
    
    def put(self, entry: LogEntry) -> None:
        """
        Persist an entry and add it to the index.
        
        A failed file write is not reported; the entry is still indexed and
        visible for the rest of the process lifetime.
        
        Args:
            entry: Entry to store
        """
        self._purge_if_new_day()
        
        with self._lock:
            self._write_entry_file(entry)
            position = self._index.insert(entry)
        
        logger.debug(
            "Stored entry",
            log_id=entry.log_id,
            level=entry.level.value,
            position=position,
        )
    
    def get_by_id(self, log_id: str) -> LogEntry:
        """
        Look up an entry by identifier.
        
        Raises:
            NoSuchLogEntryError: If no entry has that identifier
        """
        self._purge_if_new_day()
        
        with self._lock:
            entry = self._index.find_by_id(log_id)
        
        if entry is None:
            raise NoSuchLogEntryError(log_id)
        return entry
    
    def get(self, before: datetime, level: Level, limit: int) -> List[LogEntry]:
        """
        Query entries older than ``before``, most recent first.
        
        Args:
            before: Exclusive upper time bound
            level: Level filter, or Level.ANY
            limit: Maximum number of entries (must be positive)
        
        Returns:
            New list of entries in descending time order (empty if none match)
        
        Raises:
            InvalidLimitError: If limit is not positive
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise InvalidLimitError(limit)
        
        level = Level.parse(level)
        
        self._purge_if_new_day()
        
        with self._lock:
            if len(self._index) == 0:
                return []
            return self._index.range_query(before, level, limit)
    
    def __len__(self) -> int:
        self._purge_if_new_day()
        with self._lock:
            return len(self._index)
    
    def close(self) -> None:
        """Release the store. Entries are already on disk."""
        logger.info("Closed local store", directory=str(self.directory))
    
    def __enter__(self) -> "LocalStore":
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class NullStore:
    """Store that keeps nothing. Queries raise NoStorageError."""
    
    def put(self, entry: LogEntry) -> None:
        pass
    
    def get_by_id(self, log_id: str) -> LogEntry:
        raise NoStorageError()
    
    def get(self, before: datetime, level: Level, limit: int) -> List[LogEntry]:
        raise NoStorageError()
    
    def close(self) -> None:
        pass
