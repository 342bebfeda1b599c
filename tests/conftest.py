"""Shared test configuration."""

import pytest

from locallog.utils.logging import configure_logging


@pytest.fixture(scope="session", autouse=True)
def structured_logging():
    """Route library diagnostics through stdlib logging, away from stdout."""
    configure_logging(log_level="WARNING", log_format="console", log_output="stderr")
