"""Logging setup for the CombinedRegex command line."""
# src/combinedregex/logging_utils.py

import logging
import sys
import time
from logging import FileHandler
from pathlib import Path


class _UtcMicrosecondFormatter(logging.Formatter):
    """Formats timestamps as UTC ISO-8601 with 6-digit microseconds."""

    converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the time with 6-digit microseconds and a 'Z' for UTC."""
        ct = self.converter(record.created)
        s = time.strftime(datefmt, ct) if datefmt else time.strftime(self.default_time_format, ct)
        microseconds = int((record.created - int(record.created)) * 1_000_000)
        return f"{s}.{microseconds:06d}Z"


# Console Log Formatter
class ConsoleFormatter(_UtcMicrosecondFormatter):
    """A formatter for console output with short, user-facing lines."""

    def __init__(self, version: str) -> None:
        """
        Initialize the formatter with the application version.

        Args:
            version: The CombinedRegex version, included in every line.

        """
        super().__init__(
            fmt=f"%(asctime)s | CombinedRegex - {version} | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


# File Log Formatter
class FileFormatter(_UtcMicrosecondFormatter):
    """A detailed formatter for debug log files."""

    def __init__(self) -> None:
        """Initialize the detailed file formatter."""
        super().__init__(
            fmt="%(asctime)s | %(name)-28s | %(funcName)-22s:%(lineno)-4d | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )


def setup_logging(version: str, *, debug: bool = False, log_file: Path | None = None) -> None:
    """
    Configure the root logger.

    The console handler logs INFO and above, or DEBUG when debug is set. With
    debug enabled and a log_file given, detailed records are also written to
    that file.

    Args:
        version: The application version, included in console logs.
        debug: Lower the level to DEBUG.
        log_file: Where to write the detailed debug log.

    """
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    level = logging.DEBUG if debug else logging.INFO
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter(version))
    root_logger.addHandler(console_handler)

    if debug and log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = FileHandler(log_file, mode="w", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(FileFormatter())
            root_logger.addHandler(file_handler)
            logging.getLogger().info("Debug mode enabled. Detailed logs will be written to %s", log_file)
        except OSError:
            # Console logging keeps working without the file.
            logging.getLogger().exception("Failed to create debug log file. Continuing with console logging only.")
