"""Tests for the logging utilities module."""

import logging
import tempfile
import time
import unittest
from pathlib import Path
from unittest.mock import patch

from combinedregex.logging_utils import ConsoleFormatter, FileFormatter, setup_logging


def _record(name: str = "test", level: int = logging.INFO, msg: str = "Test") -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestConsoleFormatter(unittest.TestCase):
    """Test suite for ConsoleFormatter class."""

    def test_console_formatter_initialization(self) -> None:
        """1. Initialization: Creates formatter with correct format string and version."""
        formatter = ConsoleFormatter("1.0.0")

        assert formatter.datefmt == "%Y-%m-%dT%H:%M:%S"
        assert formatter.converter == time.gmtime
        assert "CombinedRegex - 1.0.0" in formatter.format(_record())

    def test_console_formatter_format_time_with_microseconds(self) -> None:
        """2. Time Format: Formats time with 6-digit microseconds and 'Z' suffix."""
        formatter = ConsoleFormatter("1.0.0")
        record = _record()
        record.created = 1234567890.123456

        formatted_time = formatter.formatTime(record, formatter.datefmt)

        assert formatted_time.startswith("2009-02-13T23:31:30.")
        assert formatted_time.endswith("Z")
        microseconds_part = formatted_time.split(".")[-1].rstrip("Z")
        assert len(microseconds_part) == 6
        assert microseconds_part == "123456"

    def test_console_formatter_message_format(self) -> None:
        """3. Message Format: Formats complete log message with version and timestamp."""
        formatter = ConsoleFormatter("2.0.0")
        record = _record(msg="Combined 3 pattern(s)")
        record.created = 1234567890.123456

        formatted = formatter.format(record)

        assert formatted.startswith("2009-02-13T23:31:30.123456Z | CombinedRegex - 2.0.0 | ")
        assert formatted.endswith("Combined 3 pattern(s)")


class TestFileFormatter(unittest.TestCase):
    """Test suite for FileFormatter class."""

    def test_file_formatter_detailed_format(self) -> None:
        """1. Detailed Format: Includes logger name, function name, line number and level."""
        formatter = FileFormatter()
        record = _record(name="combinedregex.compiler", level=logging.DEBUG, msg="Detailed log")
        record.funcName = "compile_patterns"

        formatted = formatter.format(record)

        assert formatter.converter == time.gmtime
        assert "combinedregex.compiler" in formatted
        assert "compile_patterns" in formatted
        assert "42" in formatted
        assert "DEBUG" in formatted
        assert "Detailed log" in formatted


class TestSetupLogging(unittest.TestCase):
    """Test suite for setup_logging function."""

    def setUp(self) -> None:
        """Remember the root logger state."""
        self.root_logger = logging.getLogger()
        self.original_handlers = self.root_logger.handlers[:]
        self.original_level = self.root_logger.level

    def tearDown(self) -> None:
        """Restore the root logger state."""
        for handler in self.root_logger.handlers:
            if handler not in self.original_handlers:
                handler.close()
        self.root_logger.handlers = self.original_handlers
        self.root_logger.setLevel(self.original_level)

    def test_setup_logging_default(self) -> None:
        """1. Default: One console handler at INFO level."""
        setup_logging("1.0.0")

        assert self.root_logger.level == logging.INFO
        assert len(self.root_logger.handlers) == 1
        handler = self.root_logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, ConsoleFormatter)
        assert handler.level == logging.INFO

    def test_setup_logging_debug_without_file(self) -> None:
        """2. Debug: Console handler at DEBUG level and no file handler."""
        setup_logging("1.0.0", debug=True)

        assert self.root_logger.level == logging.DEBUG
        assert len(self.root_logger.handlers) == 1
        assert self.root_logger.handlers[0].level == logging.DEBUG

    def test_setup_logging_debug_with_file(self) -> None:
        """3. Debug File: A detailed file handler is added."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file = Path(tmp_dir) / "logs" / "debug.log"
            setup_logging("1.0.0", debug=True, log_file=log_file)

            file_handlers = [h for h in self.root_logger.handlers if isinstance(h, logging.FileHandler)]
            assert len(file_handlers) == 1
            assert isinstance(file_handlers[0].formatter, FileFormatter)
            assert log_file.exists()

            for handler in file_handlers:
                handler.close()
                self.root_logger.removeHandler(handler)

    def test_setup_logging_file_ignored_without_debug(self) -> None:
        """4. No Debug: The log file is only used in debug mode."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file = Path(tmp_dir) / "debug.log"
            setup_logging("1.0.0", log_file=log_file)

            assert not any(isinstance(h, logging.FileHandler) for h in self.root_logger.handlers)
            assert not log_file.exists()

    def test_setup_logging_clears_existing_handlers(self) -> None:
        """5. Idempotent: Repeated setup does not duplicate handlers."""
        setup_logging("1.0.0")
        setup_logging("1.0.0")

        assert len(self.root_logger.handlers) == 1

    @patch("combinedregex.logging_utils.FileHandler", side_effect=OSError("read-only"))
    def test_setup_logging_file_error(self, _mock_handler: object) -> None:
        """6. File Error: Console logging continues when the file cannot be created."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            setup_logging("1.0.0", debug=True, log_file=Path(tmp_dir) / "debug.log")

        assert len(self.root_logger.handlers) == 1
        assert isinstance(self.root_logger.handlers[0].formatter, ConsoleFormatter)


if __name__ == "__main__":
    unittest.main()
