"""Tests for the command line entry point."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from locallog import main as cli
from locallog.core.entry import Level, LogEntry
from locallog.core.store import LocalStore


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI from reconfiguring global logging during tests."""
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


@pytest.fixture
def populated_dir(temp_dir):
    """Store directory holding three entries from the last hour."""
    now = datetime.now(timezone.utc)
    with LocalStore(temp_dir) as store:
        store.put(LogEntry("a", now - timedelta(minutes=30), Level.INFO, "first"))
        store.put(LogEntry("b", now - timedelta(minutes=20), Level.ERROR, "second"))
        store.put(LogEntry("c", now - timedelta(minutes=10), Level.INFO, "third"))
    return temp_dir


class TestParseArgs:
    """Test argument parsing."""
    
    def test_query_defaults(self):
        """Test query defaults."""
        args = cli.parse_args(["query"])
        
        assert args.command == "query"
        assert args.level is Level.ANY
        assert args.limit == 20
        assert args.before is None
    
    def test_query_options(self):
        """Test query options are converted."""
        args = cli.parse_args([
            "query",
            "--level", "error",
            "--before", "2024-01-02T10:00:00Z",
            "--limit", "3",
        ])
        
        assert args.level is Level.ERROR
        assert args.before == datetime(2024, 1, 2, 10, 0, tzinfo=timezone.utc)
        assert args.limit == 3
    
    def test_command_required(self):
        """Test a subcommand must be given."""
        with pytest.raises(SystemExit):
            cli.parse_args([])


class TestQueryCommand:
    """Test the query subcommand."""
    
    def test_prints_most_recent_first(self, populated_dir, capsys):
        """Test entries are printed newest first."""
        status = cli.main(["query", "--dir", str(populated_dir), "--limit", "2"])
        
        lines = capsys.readouterr().out.splitlines()
        assert status == 0
        assert [line.split()[-1] for line in lines] == ["third", "second"]
    
    def test_level_filter(self, populated_dir, capsys):
        """Test filtering by level."""
        status = cli.main(["query", "--dir", str(populated_dir), "--level", "INFO"])
        
        lines = capsys.readouterr().out.splitlines()
        assert status == 0
        assert [line.split()[-1] for line in lines] == ["third", "first"]
    
    def test_by_id(self, populated_dir, capsys):
        """Test printing a single entry."""
        status = cli.main(["query", "--dir", str(populated_dir), "--id", "b"])
        
        assert status == 0
        assert capsys.readouterr().out.strip().endswith("ERROR    second")
    
    def test_unknown_id(self, populated_dir, capsys):
        """Test a missing id exits with an error."""
        status = cli.main(["query", "--dir", str(populated_dir), "--id", "zzz"])
        
        assert status == 1
        assert "zzz" in capsys.readouterr().err
    
    def test_invalid_limit(self, populated_dir, capsys):
        """Test a non-positive limit exits with an error."""
        status = cli.main(["query", "--dir", str(populated_dir), "--limit", "0"])
        
        assert status == 1
        assert "limit" in capsys.readouterr().err
    
    def test_directory_from_config(self, populated_dir, capsys):
        """Test the store directory can come from a config file."""
        conf = populated_dir / "conf.yaml"
        conf.write_text(f"store:\n  directory: {populated_dir}\n")
        
        status = cli.main(["--config", str(conf), "query", "--limit", "1"])
        
        assert status == 0
        assert capsys.readouterr().out.strip().endswith("third")
