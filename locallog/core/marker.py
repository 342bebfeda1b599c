"""
Persistent record of the last purge time.

Stored as a single JSON string timestamp in a reserved file alongside the
entry files.
"""

import json
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from locallog.core.entry import as_utc, format_time, parse_time
from locallog.utils.logging import get_logger

logger = get_logger(__name__)

MARKER_FILE_NAME = "lastPurge.json"


@dataclass
class PurgeMarker:
    """
    Time of the last purge sweep.
    
    Attributes:
        last_purge: When data was last cleared (aware UTC)
    """
    
    last_purge: datetime
    
    def __post_init__(self) -> None:
        self.last_purge = as_utc(self.last_purge)
    
    def save(self, path: Path) -> None:
        """
        Save marker to disk.
        
        Args:
            path: File path to save to
        
        Raises:
            OSError: If the file cannot be written
        """
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "w") as f:
            json.dump(format_time(self.last_purge), f)
        
        os.replace(tmp_path, path)
        
        logger.debug("Saved purge marker", path=str(path), last_purge=format_time(self.last_purge))
    
    @classmethod
    def load(cls, path: Path) -> Optional["PurgeMarker"]:
        """
        Load marker from disk.
        
        Args:
            path: File path to load from
        
        Returns:
            The marker, or None if the file is missing or unreadable
        """
        if not path.exists():
            return None
        
        try:
            with open(path) as f:
                last_purge = parse_time(json.load(f))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable purge marker", path=str(path), error=str(e))
            return None
        
        return cls(last_purge=last_purge)
