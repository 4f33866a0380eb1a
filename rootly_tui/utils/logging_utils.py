"""Logging utilities for rootly-tui.

Modules use the standard pattern:

    import logging
    logger = logging.getLogger(__name__)

The TUI owns the terminal, so nothing is logged to stdout/stderr while it
runs. `setup_tui_logging()` sends records to a rotating file and to the
in-memory ring buffer shown by the logs overlay.
"""

import logging
import threading
from collections import deque
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from ..config.constants import LOG_BUFFER_SIZE, LOG_FILE_NAME, ROOTLY_TUI_CONFIG_DIR

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_BUFFER_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


class LogRingBuffer(logging.Handler):
    """Logging handler that keeps the last N formatted records in memory."""

    def __init__(self, capacity: int = LOG_BUFFER_SIZE, level: int = logging.NOTSET):
        super().__init__(level)
        self.capacity = capacity
        self._records: deque[str] = deque(maxlen=capacity)
        self._total = 0
        self._buffer_lock = threading.Lock()
        self.setFormatter(logging.Formatter(_BUFFER_FORMAT, datefmt="%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        with self._buffer_lock:
            self._records.append(line)
            self._total += 1

    def snapshot(self) -> tuple[int, list[str]]:
        """(records ever emitted, buffered lines). The count lets readers tail new lines."""
        with self._buffer_lock:
            return self._total, list(self._records)

    def clear(self) -> None:
        with self._buffer_lock:
            self._records.clear()


_ring_buffer: Optional[LogRingBuffer] = None


def get_log_buffer() -> LogRingBuffer:
    """Get the process-wide ring buffer, creating it on first use."""
    global _ring_buffer
    if _ring_buffer is None:
        _ring_buffer = LogRingBuffer()
    return _ring_buffer


def get_log_file(log_dir: Optional[Path] = None) -> Path:
    log_dir = log_dir or ROOTLY_TUI_CONFIG_DIR
    return log_dir / LOG_FILE_NAME


def setup_tui_logging(debug: bool = False, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Set up logging for a TUI session.

    The root logger is set to WARNING to keep third-party libs (httpx,
    textual) quiet. rootly_tui.* loggers are set to INFO, or DEBUG when
    `debug` is true.

    Returns:
        The rootly_tui package logger.
    """
    app_logger = logging.getLogger("rootly_tui")
    app_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    buffer = get_log_buffer()
    if buffer not in app_logger.handlers:
        app_logger.addHandler(buffer)

    try:
        log_file = get_log_file(log_dir)
        log_file.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

        root = logging.getLogger()
        if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
            handler = RotatingFileHandler(
                log_file, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
            )
            handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            root.addHandler(handler)
            root.setLevel(logging.WARNING)
    except OSError as e:
        # The ring buffer still works; record why the file is missing
        app_logger.warning(f"File logging disabled: {e}")

    return app_logger
