"""
LeaseLink - Enumerations

LogLevel orders log severities for sink filtering.
NotificationStatus classifies the status reported by webhook notifications.
"""

from enum import Enum, IntEnum
from typing import Any, Optional


class LogLevel(str, Enum):
    """Log severities, lowest first."""

    DEBUG = "debug"
    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    ALERT = "alert"
    EMERGENCY = "emergency"

    @classmethod
    def from_string(cls, level: Any) -> "LogLevel":
        """
        Map a level name (case-insensitive) to a LogLevel.
        Unknown names fall back to INFO instead of raising.
        """
        if isinstance(level, cls):
            return level
        try:
            return cls(str(level).strip().lower())
        except ValueError:
            return cls.INFO

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def should_log(self, minimum_level: "LogLevel") -> bool:
        return should_log(self, minimum_level)


_SEVERITY = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.NOTICE: 2,
    LogLevel.WARNING: 3,
    LogLevel.ERROR: 4,
    LogLevel.CRITICAL: 5,
    LogLevel.ALERT: 6,
    LogLevel.EMERGENCY: 7,
}


def should_log(current: Any, minimum: Any) -> bool:
    """True when `current` is at least as severe as `minimum`."""
    return (
        LogLevel.from_string(current).severity
        >= LogLevel.from_string(minimum).severity
    )


class NotificationStatus(IntEnum):
    """Order status reported by LeaseLink webhook notifications."""

    PROCESSING = 0
    CANCELLED = -1
    ACCEPTED = 2
    SEND_ASSET = 3
    SIGN_CONTRACT = 4

    @classmethod
    def from_string(cls, status: Any) -> Optional["NotificationStatus"]:
        if not isinstance(status, str):
            return None
        return cls.__members__.get(status.strip().upper())
