"""Tests for the leveled logging facade."""

import io
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from locallog.core.entry import Level
from locallog.core.store import NoStorageError, NoSuchLogEntryError
from locallog.display.console import ConsoleDisplay
from locallog.log import (
    Log,
    format_message,
    new_console_log,
    new_dev_null_log,
    new_local_log,
)
from locallog.utils.config import Config


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def far_future():
    return datetime.now(timezone.utc) + timedelta(days=1)


class TestFormatMessage:
    """Test format_message."""
    
    def test_strings_concatenated(self):
        """Test adjacent strings are joined without spaces."""
        assert format_message("serving from: ", "/srv") == "serving from: /srv"
    
    def test_space_between_non_strings(self):
        """Test a space separates two adjacent non-string values."""
        assert format_message(1, 2, "x", 3) == "1 2x3"
    
    def test_empty(self):
        """Test no arguments give an empty message."""
        assert format_message() == ""


class TestLog:
    """Test Log."""
    
    def test_leveled_methods(self, temp_dir):
        """Test each method stamps the right level."""
        log = new_local_log(temp_dir)
        
        entries = [
            log.info("i"),
            log.warning("w"),
            log.error("e"),
            log.critical("c"),
        ]
        
        assert [e.level for e in entries] == [
            Level.INFO,
            Level.WARNING,
            Level.ERROR,
            Level.CRITICAL,
        ]
        log.close()
    
    def test_entries_stored(self, temp_dir):
        """Test logged entries can be queried back."""
        log = new_local_log(temp_dir)
        
        first = log.info("port ", 8080)
        second = log.error("failed")
        
        assert first.message == "port 8080"
        assert log.get_by_id(first.log_id) == first
        assert log.get(far_future(), Level.ANY, 10)[0].log_id == second.log_id
        assert log.get(far_future(), Level.ERROR, 10) == [second]
        assert (temp_dir / f"{first.log_id}.json").exists()
        log.close()
    
    def test_get_by_id_missing(self, temp_dir):
        """Test unknown ids surface the store's not-found error."""
        log = new_local_log(temp_dir)
        
        with pytest.raises(NoSuchLogEntryError):
            log.get_by_id("nope")
        log.close()
    
    def test_mirrors_to_injected_display(self, temp_dir):
        """Test entries are forwarded to a caller-owned display."""
        stream = io.StringIO()
        display = ConsoleDisplay(stream=stream, colors=False)
        display.start()
        
        log = new_local_log(temp_dir, print_to_stdout=True, display=display)
        log.warning("careful")
        log.close()
        
        assert display.running
        display.stop()
        assert stream.getvalue().rstrip().endswith("WARNING  careful")
    
    def test_no_display_when_not_mirroring(self, temp_dir):
        """Test print_to_stdout=False ignores displays entirely."""
        log = new_local_log(temp_dir, print_to_stdout=False)
        
        assert log.display is None
        log.close()
    
    def test_owned_display_stopped_on_close(self, temp_dir):
        """Test a display created by the log is stopped with it."""
        log = new_local_log(temp_dir, print_to_stdout=True, line_spacing=1)
        display = log.display
        
        assert display.running
        assert display.line_spacing == 1
        
        log.close()
        
        assert not display.running
    
    def test_returns_entry_when_persistence_fails(self, temp_dir):
        """Test the entry is returned even if its file cannot be written."""
        log = new_local_log(temp_dir)
        
        class FailingWrites:
            def __init__(self, store):
                self.store = store
            
            def put(self, entry):
                (temp_dir / f"{entry.log_id}.json").mkdir()
                self.store.put(entry)
            
            def __getattr__(self, name):
                return getattr(self.store, name)
        
        log.store = FailingWrites(log.store)
        entry = log.critical("still returned")
        
        assert entry.message == "still returned"
        assert log.get_by_id(entry.log_id) == entry
        log.close()
    
    def test_context_manager(self, temp_dir):
        """Test the log closes its display on exit."""
        with new_local_log(temp_dir, print_to_stdout=True) as log:
            display = log.display
        
        assert not display.running
    
    def test_from_config(self, temp_dir):
        """Test building a log from configuration."""
        config = Config()
        config.set("store.directory", str(temp_dir / "configured"))
        config.set("display.enabled", False)
        
        log = Log.from_config(config)
        log.info("configured")
        
        assert (temp_dir / "configured").is_dir()
        assert log.display is None
        log.close()


class TestConsoleAndDevNullLogs:
    """Test logs without storage."""
    
    def test_console_log_prints(self):
        """Test a console log renders but keeps no history."""
        stream = io.StringIO()
        display = ConsoleDisplay(stream=stream, colors=False)
        display.start()
        
        log = new_console_log(display=display)
        entry = log.info("to the screen")
        display.stop()
        
        assert "INFO     to the screen" in stream.getvalue()
        with pytest.raises(NoStorageError):
            log.get_by_id(entry.log_id)
        with pytest.raises(NoStorageError):
            log.get(far_future(), Level.ANY, 10)
    
    def test_console_log_owns_default_display(self):
        """Test a console log without an injected display creates one."""
        log = new_console_log(line_spacing=0)
        
        assert log.display is not None
        assert log.display.running
        
        log.close()
        
        assert not log.display.running
    
    def test_dev_null_log(self):
        """Test a dev-null log drops everything."""
        log = new_dev_null_log()
        
        entry = log.error("ignored")
        
        assert entry.level is Level.ERROR
        assert log.display is None
        with pytest.raises(NoStorageError):
            log.get(far_future(), Level.ANY, 1)
