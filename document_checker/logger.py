"""Structured logging utilities for document-checker."""

import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

# Identifies the check currently being processed, across worker threads
check_id_var: ContextVar[Optional[str]] = ContextVar("check_id", default=None)

MAX_LOGGED_RULE_CHARS = 80


class ContextLogger:
    """Logger wrapper that appends structured data to log messages."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @staticmethod
    def _format_extra_data(extra_data: Optional[dict[str, Any]]) -> str:
        if not extra_data:
            return ""
        parts = [f"{k}={v}" for k, v in extra_data.items()]
        return " [" + ", ".join(parts) + "]"

    def _log(
        self,
        level: int,
        msg: str,
        extra_data: Optional[dict[str, Any]] = None,
        **kwargs,
    ):
        if not self.logger.isEnabledFor(level):
            return

        data = dict(extra_data) if extra_data else {}
        check_id = check_id_var.get()
        if check_id:
            data["check_id"] = check_id

        self.logger.log(level, msg + self._format_extra_data(data), **kwargs)

    def debug(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.DEBUG, msg, extra_data, **kwargs)

    def info(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.INFO, msg, extra_data, **kwargs)

    def warning(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.WARNING, msg, extra_data, **kwargs)

    def error(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.ERROR, msg, extra_data, **kwargs)


def setup_logging(log_level: str = "INFO"):
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger instance (typically for ``__name__``)."""
    return ContextLogger(logging.getLogger(name))


@contextmanager
def check_context(check_id: Optional[str] = None) -> Iterator[str]:
    """Bind a check ID to every log line emitted inside the block.

    Args:
        check_id: Optional check ID. A new UUID is generated when omitted.

    Yields:
        The check ID in effect
    """
    check_id = check_id or str(uuid.uuid4())
    token = check_id_var.set(check_id)
    try:
        yield check_id
    finally:
        check_id_var.reset(token)


def get_check_id() -> Optional[str]:
    """Get the check ID bound to the current context."""
    return check_id_var.get()


def shorten(text: Optional[str], limit: int = MAX_LOGGED_RULE_CHARS) -> str:
    """Clip free text (rules, provider output) for log lines."""
    if not text:
        return ""
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


class Timer:
    """Context manager for timing operations in milliseconds."""

    def __init__(self, name: str):
        self.name = name
        self.start_time: Optional[float] = None
        self.elapsed_ms: Optional[int] = None

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        if self.start_time is not None:
            self.elapsed_ms = int((time.perf_counter() - self.start_time) * 1000)

    def get_elapsed_ms(self) -> int:
        """Get elapsed time, or time so far while the block is still running."""
        if self.elapsed_ms is not None:
            return self.elapsed_ms
        if self.start_time is not None:
            return int((time.perf_counter() - self.start_time) * 1000)
        return 0
