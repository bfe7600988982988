"""Levelled diagnostic messages written to standard error."""

from __future__ import annotations

import enum
import sys


class LogLevel(enum.IntEnum):
    """Severity of a diagnostic message, in increasing order."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3


_current_level = LogLevel.INFO


def set_log_level(level):
    """Set the lowest level of messages that are written."""
    global _current_level
    _current_level = LogLevel(level)


def get_log_level():
    """Return the lowest level of messages that are written."""
    return _current_level


def log_message(level, fmt, *args):
    """Write ``fmt % args`` to stderr, prefixed by the level, if the level is enabled."""
    level = LogLevel(level)
    if level < _current_level:
        return
    text = fmt % args if args else fmt
    sys.stderr.write(f"[{level.name}] {text}")