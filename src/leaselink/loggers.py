"""
LeaseLink - Log Sinks

The library reports its lifecycle events to a pluggable sink with the
signature `log(level, message, context)`. Sinks shipped here:

- NullLogger: discards everything.
- StandardLogger: forwards to a `logging` logger (default for the API client).
- FileLogger: appends entries to a file, honouring the debug flag and the
  minimum LeaseLink log level.
- CompositeLogger: fans out to several sinks.

Usage:
------
    from leaselink import FileLogger, LeaseLinkApiClient, LeaseLinkConfig

    config = LeaseLinkConfig(api_key="...", is_test=True, debug=True)
    client = LeaseLinkApiClient(config, logger=FileLogger.from_config(config))
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import LeaseLinkConfig
from .enums import LogLevel


logger = logging.getLogger(__name__)

# syslog levels that have no stdlib counterpart
NOTICE = 25
ALERT = 55
EMERGENCY = 60

logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(ALERT, "ALERT")
logging.addLevelName(EMERGENCY, "EMERGENCY")

STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.NOTICE: NOTICE,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
    LogLevel.ALERT: ALERT,
    LogLevel.EMERGENCY: EMERGENCY,
}

LevelLike = Union[LogLevel, str]
Context = Optional[Dict[str, Any]]


class LogSink(ABC):
    """
    Observer receiving LeaseLink log entries.

    Subclasses implement `log`; the level helpers delegate to it.
    """

    @abstractmethod
    def log(self, level: LevelLike, message: str, context: Context = None) -> None:
        raise NotImplementedError

    def debug(self, message: str, context: Context = None) -> None:
        self.log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Context = None) -> None:
        self.log(LogLevel.INFO, message, context)

    def notice(self, message: str, context: Context = None) -> None:
        self.log(LogLevel.NOTICE, message, context)

    def warning(self, message: str, context: Context = None) -> None:
        self.log(LogLevel.WARNING, message, context)

    def error(self, message: str, context: Context = None) -> None:
        self.log(LogLevel.ERROR, message, context)

    def critical(self, message: str, context: Context = None) -> None:
        self.log(LogLevel.CRITICAL, message, context)

    def alert(self, message: str, context: Context = None) -> None:
        self.log(LogLevel.ALERT, message, context)

    def emergency(self, message: str, context: Context = None) -> None:
        self.log(LogLevel.EMERGENCY, message, context)


class NullLogger(LogSink):
    """Sink that drops every entry."""

    def log(self, level: LevelLike, message: str, context: Context = None) -> None:
        return None


class StandardLogger(LogSink):
    """Forward entries to a standard library logger."""

    def __init__(self, std_logger: Optional[logging.Logger] = None) -> None:
        self.std_logger = std_logger or logging.getLogger("leaselink")

    def log(self, level: LevelLike, message: str, context: Context = None) -> None:
        log_level = LogLevel.from_string(level)
        self.std_logger.log(STDLIB_LEVELS[log_level], format_entry(message, context))


class FileLogger(StandardLogger):
    """
    Append entries to a log file.

    Debug entries are written only when `debug` is enabled; everything below
    `minimum_level` is dropped. Parent directories are created on init.
    """

    SEPARATOR = "-" * 80

    def __init__(
        self,
        log_file: Union[str, Path],
        debug: bool = False,
        minimum_level: LevelLike = LogLevel.INFO,
    ) -> None:
        self.log_file = Path(log_file)
        self.debug_enabled = debug
        self.minimum_level = LogLevel.from_string(minimum_level)

        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self._create_file_logger(self.log_file))

    @classmethod
    def from_config(cls, config: LeaseLinkConfig) -> "FileLogger":
        return cls(config.log_file, debug=config.debug, minimum_level=config.log_level)

    @staticmethod
    def _create_file_logger(log_file: Path) -> logging.Logger:
        """
        A private stdlib logger with its own handler for this sink.

        The logger is not registered with `logging.getLogger`, so closing one
        FileLogger never affects another writing to the same path.
        """
        std_logger = logging.Logger(f"leaselink.file.{log_file}", logging.DEBUG)
        std_logger.propagate = False

        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8", delay=True)
        fh.setFormatter(
            logging.Formatter(
                fmt="[%(asctime)s] [%(leaselink_level)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        std_logger.addHandler(fh)
        return std_logger

    def log(self, level: LevelLike, message: str, context: Context = None) -> None:
        log_level = LogLevel.from_string(level)

        if log_level is LogLevel.DEBUG and not self.debug_enabled:
            return
        if not log_level.should_log(self.minimum_level):
            return

        entry = message
        if context:
            entry += "\nContext: " + _dump_context(context, indent=4)
        entry += "\n" + self.SEPARATOR

        # the level is written as given by the caller
        tag = level.value if isinstance(level, LogLevel) else str(level)
        self.std_logger.log(STDLIB_LEVELS[log_level], entry, extra={"leaselink_level": tag})

    def close(self) -> None:
        for handler in list(self.std_logger.handlers):
            handler.close()
            self.std_logger.removeHandler(handler)


class CompositeLogger(LogSink):
    """Send every entry to each of the wrapped sinks, in order."""

    def __init__(self, *sinks: LogSink) -> None:
        self.sinks = list(sinks)

    def add(self, sink: LogSink) -> "CompositeLogger":
        self.sinks.append(sink)
        return self

    def log(self, level: LevelLike, message: str, context: Context = None) -> None:
        for sink in self.sinks:
            emit(sink, level, message, context)


def emit(sink: Optional[LogSink], level: LevelLike, message: str, context: Context = None) -> None:
    """
    Deliver an entry to `sink` without letting a broken sink interrupt the caller.
    Sink failures are reported to this module's stdlib logger.
    """
    if sink is None:
        return
    try:
        sink.log(level, message, context)
    except Exception:
        logger.warning("LeaseLink log sink %r failed", sink, exc_info=True)


def format_entry(message: str, context: Context = None) -> str:
    if not context:
        return message
    return f"{message} | {_dump_context(context)}"


def _dump_context(context: Dict[str, Any], indent: Optional[int] = None) -> str:
    return json.dumps(context, indent=indent, ensure_ascii=False, default=str)
