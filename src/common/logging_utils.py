"""Centralized logging helpers.

Every entry point calls ``configure_logging`` once; modules then use
``logging.getLogger(__name__)``. Structured DEBUG traces carry their fields
through ``extra_context`` so handlers can pick them up without changing the
human-readable message.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_HANDLER_MARK = "_releasegate_handler"


def configure_logging(log_file: Optional[str] = None) -> None:
    """Configure the root logger from the environment.

    The level comes from ``RELEASEGATE_LOG_LEVEL`` (default INFO). When
    ``log_file`` is given, records go to that file instead of stderr.
    """
    level_name = os.environ.get(Constants.LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    # Only replace handlers installed by a previous call
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            root.removeHandler(existing)
            existing.close()

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler()
    setattr(handler, _HANDLER_MARK, True)
    handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record, dropping None values."""
    return {key: value for key, value in fields.items() if value is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def safe_url(url: str) -> str:
    """Strip credentials, query string and fragment from a URL for logging."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid-url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Return elapsed milliseconds, measured up to now while still running."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 2)
