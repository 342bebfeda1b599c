"""Tests for concurrent access to a local store."""

import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from locallog.core.entry import Level, LogEntry
from locallog.core.store import LocalStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def far_future():
    return datetime.now(timezone.utc) + timedelta(days=1)


class TestConcurrentAccess:
    """Test concurrent reads and writes."""
    
    def test_concurrent_writes(self, temp_dir):
        """Test writes from multiple threads are all kept, in order."""
        store = LocalStore(temp_dir)
        
        def writer(thread_id, count):
            for i in range(count):
                store.put(LogEntry.create(Level.INFO, f"thread-{thread_id} msg-{i}"))
        
        threads = []
        for i in range(5):
            t = threading.Thread(target=writer, args=(i, 20))
            threads.append(t)
            t.start()
        
        for t in threads:
            t.join()
        
        result = store.get(far_future(), Level.ANY, 1000)
        
        assert len(result) == 100
        assert all(result[i].time >= result[i + 1].time for i in range(len(result) - 1))
        assert len(list(temp_dir.glob("*.json"))) == 101
    
    def test_concurrent_read_write(self, temp_dir):
        """Test readers always see a consistent, ordered snapshot."""
        store = LocalStore(temp_dir)
        errors = []
        done = threading.Event()
        
        def writer():
            for i in range(50):
                store.put(LogEntry.create(Level.WARNING, f"msg-{i}"))
            done.set()
        
        def reader():
            while not done.is_set():
                result = store.get(far_future(), Level.ANY, 100)
                if any(result[i].time < result[i + 1].time for i in range(len(result) - 1)):
                    errors.append("out of order")
        
        write_thread = threading.Thread(target=writer)
        read_thread = threading.Thread(target=reader)
        
        write_thread.start()
        read_thread.start()
        
        write_thread.join()
        read_thread.join()
        
        assert errors == []
        assert len(store.get(far_future(), Level.ANY, 100)) == 50
