"""Tests for logging setup."""

import logging

import pytest

from src.logging_config import setup_logging


@pytest.fixture
def bare_root(monkeypatch):
    """Root logger with no handlers; restored after the test."""
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    yield root
    for handler in root.handlers:
        handler.close()


class TestSetupLogging:
    def test_per_tool_log_file(self, bare_root, tmp_path):
        log_file = setup_logging(log_dir=tmp_path, tool="autopick_poller")
        assert log_file == tmp_path / "autopick_poller.log"
        assert log_file.exists()

    def test_console_follows_level_file_keeps_debug(self, bare_root, tmp_path):
        setup_logging("WARNING", log_dir=tmp_path)
        levels = {type(h).__name__: h.level for h in bare_root.handlers}
        assert levels["RotatingFileHandler"] == logging.DEBUG
        assert levels["StreamHandler"] == logging.WARNING

    def test_second_call_adds_no_handlers(self, bare_root, tmp_path):
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)
        assert len(bare_root.handlers) == 2
