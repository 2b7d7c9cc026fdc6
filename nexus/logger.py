"""Logging interface and a named logger writing to standard output."""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod

from .channels import LoggerChannel, LoggerLevel

_LEVEL_NAMES = {
    LoggerLevel.ERROR: "ERROR",
    LoggerLevel.INFO: "INFO",
    LoggerLevel.WARNING: "WARNING",
}


def level_name(code: int) -> str:
    """Upper-case name of a severity code, or UNKNOWN."""
    try:
        return _LEVEL_NAMES[LoggerLevel(code)]
    except ValueError:
        return "UNKNOWN"


def format_message(message: LoggerChannel) -> str:
    """Render a log record as a single line."""
    return f"[ID:{message.id}][{message.module}][{level_name(message.code)}] {message.log}"


class Logger(ABC):
    """Destination for log records."""

    @abstractmethod
    def log(self, message: LoggerChannel) -> None:
        """Record one message."""


class _StdoutHandler(logging.Handler):
    """Write to whatever standard output is at the time of emission."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stdout.write(self.format(record) + "\n")
            sys.stdout.flush()
        except Exception:
            self.handleError(record)


class ModuleLogger(Logger):
    """Logger shared by name: loggers created with the same name share output."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logging.getLogger(name)
        if not any(isinstance(h, _StdoutHandler) for h in self.logger.handlers):
            handler = _StdoutHandler()
            handler.setFormatter(
                logging.Formatter("[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s")
            )
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)
            self.logger.propagate = False

    def log(self, message: LoggerChannel) -> None:
        self.logger.info(format_message(message))