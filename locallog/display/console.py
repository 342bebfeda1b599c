"""
Console display for log entries.

Entries are handed to a queue and rendered by one background thread, so
logging callers never wait on terminal output.
"""

import queue
import sys
import threading
from typing import Optional, TextIO

from locallog.core.entry import Level, LogEntry
from locallog.utils.logging import get_logger

logger = get_logger(__name__)

RESET = "\033[0m"

LEVEL_STYLES = {
    Level.INFO: "\033[1;36m",
    Level.WARNING: "\033[1;33m",
    Level.ERROR: "\033[1;31m",
    Level.CRITICAL: "\033[1;30;101m",
}

# Pads level names to the width of WARNING so messages line up.
LEVEL_PADDING = {
    Level.INFO: "    ",
    Level.WARNING: " ",
    Level.ERROR: "   ",
    Level.CRITICAL: "",
}

_STOP = object()


def format_entry(entry: LogEntry, colors: bool = False) -> str:
    """
    Render an entry as ``HH:MM:SS.cc LEVEL message``.
    
    Args:
        entry: Entry to render
        colors: Wrap the line in the level's ANSI color
    
    Returns:
        Rendered line without a trailing newline
    """
    centiseconds = entry.time.microsecond // 10000
    timestamp = f"{entry.time:%H:%M:%S}.{centiseconds:02d}"
    line = f"{timestamp} {entry.level.value}{LEVEL_PADDING.get(entry.level, '')} {entry.message}"
    
    if colors and entry.level in LEVEL_STYLES:
        return f"{LEVEL_STYLES[entry.level]}{line}{RESET}"
    return line


class ConsoleDisplay:
    """
    Renders entries to a text stream from a single worker thread.
    
    Entries are printed in submission order. The display must be started
    before it accepts entries and should be stopped to flush pending output.
    
    Attributes:
        line_spacing: Blank lines printed after each entry
        colors: Whether to emit ANSI colors
    """
    
    def __init__(
        self,
        line_spacing: int = 0,
        stream: Optional[TextIO] = None,
        colors: bool = True,
    ):
        """
        Initialize console display.
        
        Args:
            line_spacing: Blank lines printed after each entry
            stream: Output stream (default: sys.stdout at start time)
            colors: Emit ANSI colors
        """
        if line_spacing < 0:
            raise ValueError(f"line_spacing must be non-negative, got {line_spacing}")
        
        self.line_spacing = line_spacing
        self.colors = colors
        self._stream = stream
        self._queue: "queue.Queue" = queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._state_lock = threading.Lock()
        self._running = False
    
    @property
    def running(self) -> bool:
        return self._running
    
    def start(self) -> None:
        """Start the worker thread. Starting twice is a no-op."""
        with self._state_lock:
            if self._running:
                return
            
            if self._stream is None:
                self._stream = sys.stdout
            
            self._worker = threading.Thread(
                target=self._run,
                name="locallog-console",
                daemon=True,
            )
            self._running = True
            self._worker.start()
        
        logger.debug("Started console display", line_spacing=self.line_spacing)
    
    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """
        Render everything already submitted, then stop the worker.
        
        Args:
            timeout: Max seconds to wait for the worker (None = wait forever)
        """
        with self._state_lock:
            if not self._running:
                return
            self._running = False
            worker = self._worker
            self._queue.put(_STOP)
        
        worker.join(timeout)
        if worker.is_alive():
            logger.warning("Console display did not stop in time", timeout=timeout)
        else:
            logger.debug("Stopped console display")
    
    def submit(self, entry: LogEntry) -> None:
        """Queue an entry for display. Never blocks on rendering."""
        with self._state_lock:
            if not self._running:
                logger.debug("Console display not running, entry dropped", log_id=entry.log_id)
                return
            self._queue.put(entry)
    
    def _run(self) -> None:
        """Worker loop: render queued entries until the stop sentinel."""
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            
            try:
                self._render(item)
            except Exception as e:
                logger.error("Failed to render entry", log_id=item.log_id, error=str(e))
    
    def _render(self, entry: LogEntry) -> None:
        self._stream.write(format_entry(entry, self.colors) + "\n")
        self._stream.write("\n" * self.line_spacing)
        self._stream.flush()
    
    def __enter__(self) -> "ConsoleDisplay":
        self.start()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
