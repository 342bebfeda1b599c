"""
In-memory time index over log entries.

Entries are kept in ascending timestamp order so range queries can locate
their upper bound with a binary search and walk backwards from there.
The index is not thread-safe; the owning store serializes access.
"""

import bisect
from datetime import datetime
from typing import List, Optional

from locallog.core.entry import Level, LogEntry, as_utc


class SortedIndex:
    """
    Ordered sequence of entries, non-decreasing by timestamp.
    
    Entries with equal timestamps have no defined relative order.
    """
    
    def __init__(self) -> None:
        self._entries: List[LogEntry] = []
    
    def insert(self, entry: LogEntry) -> int:
        """
        Insert an entry at its time-ordered position.
        
        Scans backwards from the end since new entries are usually the most
        recent ones. Duplicate identifiers are not detected.
        
        Args:
            entry: Entry to insert
        
        Returns:
            Position the entry was inserted at
        """
        position = len(self._entries)
        while position > 0 and not self._entries[position - 1].time < entry.time:
            position -= 1
        
        self._entries.insert(position, entry)
        return position
    
    def find_by_id(self, log_id: str) -> Optional[LogEntry]:
        """
        Linear scan for an entry by identifier.
        
        Returns:
            The entry, or None if no entry has that identifier
        """
        for entry in self._entries:
            if entry.log_id == log_id:
                return entry
        return None
    
    def range_query(self, before: datetime, level: Level, limit: int) -> List[LogEntry]:
        """
        Collect entries strictly older than ``before``, most recent first.
        
        Args:
            before: Exclusive upper time bound
            level: Level filter, or Level.ANY for all levels
            limit: Maximum number of entries to return (must be positive)
        
        Returns:
            New list of matching entries in descending time order
        
        Raises:
            ValueError: If limit is not positive
        """
        if limit <= 0:
            raise ValueError(f"Limit must be greater than 0, got {limit}")
        
        level = Level.parse(level)
        start = bisect.bisect_left(self._entries, as_utc(before), key=lambda e: e.time)
        
        matches: List[LogEntry] = []
        for i in range(start - 1, -1, -1):
            if len(matches) >= limit:
                break
            entry = self._entries[i]
            if level.matches(entry.level):
                matches.append(entry)
        
        return matches
    
    def clear(self) -> None:
        """Drop every entry."""
        self._entries = []
    
    def entries(self) -> List[LogEntry]:
        """Copy of all entries in ascending time order."""
        return list(self._entries)
    
    def __len__(self) -> int:
        return len(self._entries)
