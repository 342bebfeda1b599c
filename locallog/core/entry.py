"""
Log entry model and its on-disk encoding.

Each entry is stored as a small JSON document:

    {"logId": "...", "time": "2024-01-02T10:00:00.000000Z",
     "level": "INFO", "message": "..."}
"""

import json
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_FRACTION = re.compile(r"\.(\d+)")


class Level(str, Enum):
    """Severity levels. ANY is only valid as a query filter."""
    
    ANY = "ANY"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    
    @classmethod
    def parse(cls, value: Any) -> "Level":
        """
        Parse a level from a Level or a case-insensitive name.
        
        Raises:
            ValueError: If the name is not a known level
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown level: {value!r}") from None
    
    def matches(self, other: "Level") -> bool:
        """True if this filter level selects entries of level ``other``."""
        return self is Level.ANY or self is other


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_time(value: datetime) -> str:
    """Render a timestamp in the interchange format used on disk."""
    return as_utc(value).strftime(TIME_FORMAT)


def parse_time(text: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware UTC datetime.
    
    Accepts a trailing ``Z`` or a numeric offset, and fractional seconds of
    any precision (truncated to microseconds).
    
    Raises:
        ValueError: If the text is not a valid timestamp
    """
    if not isinstance(text, str):
        raise ValueError(f"Timestamp must be a string, got {type(text).__name__}")
    
    normalized = text.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    normalized = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), normalized, count=1)
    
    return as_utc(datetime.fromisoformat(normalized))


@dataclass(frozen=True)
class LogEntry:
    """
    A single immutable log record.
    
    Attributes:
        log_id: Unique identifier, also the entry's file name on disk
        time: Creation time (aware UTC)
        level: Severity level (never ANY)
        message: Free-form text
    """
    
    log_id: str
    time: datetime
    level: Level
    message: str
    
    def __post_init__(self) -> None:
        """Validate and normalize fields."""
        if not isinstance(self.log_id, str) or not self.log_id:
            raise ValueError(f"log_id must be a non-empty string, got {self.log_id!r}")
        if not isinstance(self.time, datetime):
            raise TypeError(f"time must be a datetime, got {type(self.time)}")
        if not isinstance(self.message, str):
            raise TypeError(f"message must be a string, got {type(self.message)}")
        
        level = Level.parse(self.level)
        if level is Level.ANY:
            raise ValueError("ANY is a query filter, not an entry level")
        
        object.__setattr__(self, "level", level)
        object.__setattr__(self, "time", as_utc(self.time))
    
    @classmethod
    def create(cls, level: Level, message: str) -> "LogEntry":
        """Build a new entry with a fresh identifier and the current UTC time."""
        return cls(
            log_id=str(uuid.uuid4()),
            time=utc_now(),
            level=level,
            message=message,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "logId": self.log_id,
            "time": format_time(self.time),
            "level": self.level.value,
            "message": self.message,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        """
        Create from dictionary.
        
        Raises:
            ValueError: If a field is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValueError(f"Entry must be a JSON object, got {type(data).__name__}")
        
        missing = [key for key in ("logId", "time", "level", "message") if key not in data]
        if missing:
            raise ValueError(f"Entry is missing fields: {', '.join(missing)}")
        
        try:
            return cls(
                log_id=data["logId"],
                time=parse_time(data["time"]),
                level=Level.parse(data["level"]),
                message=data["message"],
            )
        except TypeError as e:
            raise ValueError(str(e)) from e
    
    def serialize(self) -> bytes:
        """Encode as UTF-8 JSON."""
        return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")
    
    @classmethod
    def deserialize(cls, data: bytes) -> "LogEntry":
        """
        Decode from UTF-8 JSON.
        
        Raises:
            ValueError: If the data is not a valid encoded entry
        """
        try:
            decoded = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid entry encoding: {e}") from e
        
        return cls.from_dict(decoded)
