"""
Daily purge policy.

A store is meant for short-lived development sessions, so rather than a
sliding retention window all data is dropped the first time the store is
touched on a new UTC calendar date.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from locallog.core.entry import as_utc, format_time
from locallog.core.marker import MARKER_FILE_NAME, PurgeMarker
from locallog.utils.logging import get_logger

logger = get_logger(__name__)

ENTRY_FILE_SUFFIX = ".json"
TEMP_FILE_SUFFIX = ".tmp"


class PurgeState(Enum):
    """Whether the stored data belongs to the current day."""
    
    FRESH = "fresh"
    STALE = "stale"


class PurgePolicy:
    """
    Decides when a store must be purged and tracks the purge marker.
    
    The marker is read lazily on first use and cached afterwards; changes made
    to the marker file by anything else are not observed.
    """
    
    def __init__(self, directory: Path, clock: Callable[[], datetime]):
        """
        Initialize purge policy.
        
        Args:
            directory: Store directory holding the marker file
            clock: Returns the current time
        """
        self.directory = Path(directory)
        self.marker_path = self.directory / MARKER_FILE_NAME
        self._clock = clock
        self._marker: Optional[PurgeMarker] = None
    
    def now(self) -> datetime:
        return as_utc(self._clock())
    
    def last_purge(self) -> datetime:
        """
        Time of the last purge, loading or initializing the marker on first use.
        
        A missing or corrupt marker is reset to now, which counts as fresh.
        """
        if self._marker is None:
            marker = PurgeMarker.load(self.marker_path)
            if marker is None:
                self.mark_purged(self.now())
            else:
                self._marker = marker
                logger.debug("Loaded purge marker", last_purge=format_time(marker.last_purge))
        
        return self._marker.last_purge
    
    def state(self) -> PurgeState:
        """Compare the marker's UTC date against today's UTC date."""
        if self.last_purge().date() != self.now().date():
            return PurgeState.STALE
        return PurgeState.FRESH
    
    def mark_purged(self, when: datetime) -> None:
        """
        Record a purge at ``when``.
        
        The in-memory marker is always updated; a failure to persist it is
        logged and means the next process start re-initializes it.
        """
        self._marker = PurgeMarker(last_purge=when)
        try:
            self._marker.save(self.marker_path)
        except OSError as e:
            logger.warning(
                "Failed to persist purge marker",
                path=str(self.marker_path),
                error=str(e),
            )
    
    def delete_entry_files(self) -> int:
        """
        Delete every entry file and leftover temp file in the directory.
        
        The marker file is kept. Files that cannot be deleted are logged and
        skipped. If the directory cannot be listed it is recreated when
        missing and nothing is deleted.
        
        Returns:
            Number of files deleted
        """
        try:
            paths = list(self.directory.iterdir())
        except OSError as e:
            logger.error(
                "Failed to list store directory",
                directory=str(self.directory),
                error=str(e),
            )
            self._recreate_directory()
            return 0
        
        deleted = 0
        
        for path in paths:
            if not path.is_file() or path.name == MARKER_FILE_NAME:
                continue
            if path.suffix not in (ENTRY_FILE_SUFFIX, TEMP_FILE_SUFFIX):
                continue
            
            try:
                path.unlink(missing_ok=True)
                deleted += 1
            except OSError as e:
                logger.error(
                    "Failed to delete entry file",
                    path=str(path),
                    error=str(e),
                )
        
        return deleted
    
    def _recreate_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(
                "Failed to recreate store directory",
                directory=str(self.directory),
                error=str(e),
            )
