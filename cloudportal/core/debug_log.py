"""Plain-text debug log for provider operations.

A ``DebugLog`` is created once when the provider is configured and passed to
every component that needs to log. When disabled, every call is a no-op and no
file is created. When enabled, lines are appended to a file that is opened on
the first write and never reopened once closed.

Line format::

    2024-05-01 10:00:00,123 client.py:88 DEBUG: https://portal/api/ticket/42
"""
from __future__ import annotations
import hashlib
import logging
import threading
from pathlib import Path
from typing import Optional

# Shared by every DebugLog in the process: concurrent reads may hold different
# instances pointing at the same file.
_WRITE_LOCK = threading.Lock()

LOG_FORMAT = "%(asctime)s %(filename)s:%(lineno)d %(levelname)s: %(message)s"


def token_fingerprint(token: str) -> str:
    """Return a short SHA-256 fingerprint safe to write to the log."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


class DebugLog:
    """Lazily opened, lock-serialised debug log file."""

    def __init__(self, enabled: bool, path: str | Path = "provider-debug.log"):
        self.enabled = enabled
        self.path = Path(path)
        self._handler: Optional[logging.FileHandler] = None
        self._closed = False
        # Not registered with logging.getLogger: one private logger per DebugLog
        self._logger = logging.Logger("cloudportal.debug")
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False

    @property
    def is_open(self) -> bool:
        return self._handler is not None and not self._closed

    def _ensure_open(self) -> bool:
        # Caller holds _WRITE_LOCK
        if self._closed:
            return False
        if self._handler is None:
            handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self._logger.addHandler(handler)
            self._handler = handler
            self._logger.info("Logger initialized", stacklevel=2)
        return True

    def _write(self, level: int, message: str) -> None:
        if not self.enabled:
            return
        with _WRITE_LOCK:
            if self._ensure_open():
                # stacklevel 3: report the caller of debug()/info()/error()
                self._logger.log(level, message, stacklevel=3)

    def debug(self, message: str) -> None:
        self._write(logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._write(logging.INFO, message)

    def error(self, message: str) -> None:
        self._write(logging.ERROR, message)

    def close(self) -> None:
        """Close the file handle. Safe to call more than once."""
        with _WRITE_LOCK:
            if self._closed:
                return
            self._closed = True
            if self._handler is not None:
                self._logger.removeHandler(self._handler)
                try:
                    self._handler.close()
                except OSError:
                    pass
