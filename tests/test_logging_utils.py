"""Tests for TUI logging setup and the in-memory log buffer."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from rootly_tui.utils.logging_utils import LogRingBuffer, get_log_buffer, setup_tui_logging


@pytest.fixture
def clean_logging():
    """Restore logger state touched by setup_tui_logging."""
    root = logging.getLogger()
    app_logger = logging.getLogger("rootly_tui")
    root_handlers = list(root.handlers)
    root_level = root.level
    app_level = app_logger.level
    yield
    for handler in list(root.handlers):
        if handler not in root_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(root_level)
    app_logger.setLevel(app_level)


class TestLogRingBuffer:
    def _logger(self, buffer: LogRingBuffer) -> logging.Logger:
        logger = logging.getLogger("rootly_tui.tests.ring")
        logger.handlers = [buffer]
        logger.propagate = False
        logger.setLevel(logging.DEBUG)
        return logger

    def test_keeps_last_n(self):
        buffer = LogRingBuffer(capacity=3)
        logger = self._logger(buffer)
        for i in range(5):
            logger.info("message %d", i)

        _, lines = buffer.snapshot()
        assert len(lines) == 3
        assert lines[0].endswith("message 2")
        assert "INFO" in lines[-1]

    def test_snapshot_counts_everything(self):
        buffer = LogRingBuffer(capacity=2)
        logger = self._logger(buffer)
        for i in range(4):
            logger.warning("w%d", i)

        total, lines = buffer.snapshot()
        assert total == 4
        assert len(lines) == 2

    def test_clear(self):
        buffer = LogRingBuffer()
        self._logger(buffer).info("x")
        buffer.clear()
        assert buffer.snapshot() == (1, [])


class TestSetupTuiLogging:
    def test_levels_and_handlers(self, tmp_path, clean_logging):
        app_logger = setup_tui_logging(debug=True, log_dir=tmp_path)

        assert app_logger.level == logging.DEBUG
        assert get_log_buffer() in app_logger.handlers
        assert any(isinstance(h, RotatingFileHandler) for h in logging.getLogger().handlers)

    def test_idempotent(self, tmp_path, clean_logging):
        setup_tui_logging(log_dir=tmp_path)
        setup_tui_logging(log_dir=tmp_path)

        app_logger = logging.getLogger("rootly_tui")
        assert app_logger.handlers.count(get_log_buffer()) == 1
        assert app_logger.level == logging.INFO
        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
