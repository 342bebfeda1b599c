"""Human-facing rendering of log entries."""

from locallog.display.console import ConsoleDisplay, format_entry

__all__ = ["ConsoleDisplay", "format_entry"]
