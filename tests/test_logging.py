"""
Tests for logging setup.
"""

import logging
from pathlib import Path

import pytest

from recipebump.core.observability.logging_config import (
    LOG_LEVEL_ENV,
    _parse_level,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.INFO

    def test_file_handler_at_its_own_level(self, tmp_path: Path):
        log_file = tmp_path / "run.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("recipebump.test").debug("hashing artifact")
        for handler in root.handlers:
            handler.flush()
        assert "hashing artifact" in log_file.read_text()

    def test_other_loggers_untouched(self):
        library = logging.getLogger("somelib")
        library.setLevel(logging.NOTSET)
        setup_logging("INFO")
        assert library.level == logging.NOTSET
        assert library.getEffectiveLevel() == logging.INFO


class TestParseLevel:
    """Tests for level name parsing."""

    @pytest.mark.parametrize(
        "name, expected",
        [("debug", logging.DEBUG), ("ERROR", logging.ERROR), (None, logging.WARNING),
         ("", logging.WARNING), ("chatty", logging.WARNING)],
    )
    def test_parse(self, name, expected):
        assert _parse_level(name) == expected


class TestResolveLevel:
    """Tests for flag and environment precedence."""

    def test_flags_win(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "ERROR")
        assert resolve_level(debug=True, quiet=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "info")
        assert resolve_level() == "info"

    def test_default(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert resolve_level() == "WARNING"
