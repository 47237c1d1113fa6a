"""Structured logging helpers shared by the resolver and service layers.

Context travels as ``extra=`` fields on ordinary ``logging`` records so any
handler can pick it up; ``ContextFormatter`` renders it as ``key=value``
pairs after the message.
"""
from __future__ import annotations

import logging
import os
import time
import urllib.parse
from typing import Any, Dict, Optional

from ..constants import Constants

# Field names emitted through extra_context(); kept clear of LogRecord attributes.
CONTEXT_FIELDS = (
    "event",
    "component",
    "action",
    "outcome",
    "target",
    "dependency",
    "resolver",
    "status_code",
    "attempt",
    "count",
    "depth",
    "duration_ms",
)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping, dropping fields that are None."""
    return {key: value for key, value in fields.items() if value is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def safe_url(url: Optional[str]) -> str:
    """Strip credentials, query and fragment from a URL before logging it."""
    if not url:
        return ""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return "<unparseable-url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urllib.parse.urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring elapsed wall time in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds; measured up to now while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)


class ContextFormatter(logging.Formatter):
    """Formatter appending structured context fields to the message."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        pairs = [
            f"{name}={getattr(record, name)}"
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        ]
        if not pairs:
            return base
        return f"{base} [{' '.join(pairs)}]"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a stderr handler with ContextFormatter on the root logger.

    The level comes from ``level``, then ``DEPMETA_LOG_LEVEL``, then INFO.
    Calling this more than once replaces the previously installed handler.
    """
    level_name = (level or os.environ.get(Constants.LOG_LEVEL_ENV) or "INFO").upper()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_depmeta_handler", False):
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter(Constants.LOG_FORMAT))
    handler._depmeta_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))
