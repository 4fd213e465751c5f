from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any

from core.errors import ConfigurationError


class LogLevel(IntEnum):
    """Ordered severity scale. Higher is more severe."""

    DEBUG = 0
    INFORMATION = 1
    WARNING = 2
    ERROR = 3

    @property
    def label(self) -> str:
        """Display name used in console lines and the level filter."""
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "LogLevel":
        """Coerce a member, its integer value or its name to a LogLevel.

        Raises ConfigurationError for anything outside the fixed set.
        """
        if isinstance(value, cls):
            return value
        # bool is an int subclass; True must not silently become INFORMATION
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ConfigurationError(f"Unknown log level: {value!r}") from None
        if isinstance(value, str):
            key = value.strip().upper()
            if key == "INFO":
                key = "INFORMATION"
            elif key == "WARN":
                key = "WARNING"
            if key in cls.__members__:
                return cls[key]
        raise ConfigurationError(f"Unknown log level: {value!r}")


class TimeFormat(str, Enum):
    """How the view renders message timestamps."""

    NONE = "none"
    COMPACT = "compact"
    FULL = "full"

    @classmethod
    def parse(cls, value: Any) -> "TimeFormat":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ConfigurationError(f"Unknown time format: {value!r}")

    def render(self, timestamp) -> str | None:
        """Format a datetime for this mode; None when the column is hidden."""
        if self is TimeFormat.NONE:
            return None
        if self is TimeFormat.FULL:
            return timestamp.strftime(FULL_TIME_FORMAT)
        return timestamp.strftime(COMPACT_TIME_FORMAT)


COMPACT_TIME_FORMAT = "%H:%M:%S"
FULL_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"
