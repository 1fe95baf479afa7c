"""A small JSON-lines logger writing to standard output."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def parse_level(level: str) -> int:
    """Map a level name to a logging level; unknown names mean info."""
    return _LEVELS.get(level.lower(), logging.INFO)


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc)
        entry = {
            "level": record.levelname.lower(),
            "time": stamp.isoformat(timespec="seconds").replace("+00:00", "Z"),
            "caller": f"{record.pathname}:{record.lineno}",
            "message": record.getMessage(),
        }
        return json.dumps(entry, ensure_ascii=False)


def _format(message: str, args: tuple[Any, ...]) -> str:
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError):
        return " ".join([message, *(str(arg) for arg in args)])


class Logger:
    """Writes every message as one JSON line at info severity.

    The configured level filters what is written; since every message is
    emitted at info severity, a level above info silences the logger.
    """

    def __init__(self, level: str = "info", stream: TextIO | None = None) -> None:
        self.level = parse_level(level)
        self._logger = logging.Logger("servicekit", self.level)
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(_JsonFormatter())
        self._logger.addHandler(handler)

    def debug(self, message: Any, *args: Any) -> None:
        self._message("debug", message, args)

    def info(self, message: Any, *args: Any) -> None:
        self._write(str(message), args, 3)

    def warn(self, message: Any, *args: Any) -> None:
        self._write(str(message), args, 3)

    def error(self, message: Any, *args: Any) -> None:
        self._message("error", message, args)

    def fatal(self, message: Any, *args: Any) -> None:
        """Log the message and stop the process with exit status 1."""
        self._message("fatal", message, args)
        raise SystemExit(1)

    def _message(self, level: str, message: Any, args: tuple[Any, ...]) -> None:
        if isinstance(message, BaseException):
            text = str(message)
        elif isinstance(message, str):
            text = message
        else:
            text = f"{level} message {message} has unknown type {message}"
        self._write(text, args, 5)

    def _write(self, message: str, args: tuple[Any, ...], depth: int) -> None:
        self._logger.info(_format(message, args), stacklevel=depth)