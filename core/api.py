"""Severity entry points that log through the current distributor.

    from core import api

    api.info("Loaded %d rows", 42, source="loader")
    api.assert_that(x > 0, "x must be positive, got %d", x)
"""

from __future__ import annotations

from core import registry
from core.errors import LoggedError
from core.levels import LogLevel
from core.message import LogMessage


def debug(text: str, *args, source: str = "") -> None:
    registry.current().log_at_level(LogLevel.DEBUG, text, *args, source=source)


def info(text: str, *args, source: str = "") -> None:
    registry.current().log_at_level(LogLevel.INFORMATION, text, *args, source=source)


def warn(text: str, *args, source: str = "") -> None:
    registry.current().log_at_level(LogLevel.WARNING, text, *args, source=source)


def error(text: str, *args, source: str = "", throw_error: bool = True) -> None:
    """Log at ERROR, then raise LoggedError unless ``throw_error`` is False."""
    message = LogMessage.create(text, *args, source=source, level=LogLevel.ERROR)
    registry.current().log(message)
    if throw_error:
        raise LoggedError(message.text)


def assert_that(
    condition,
    text: str = "Assertion failed.",
    *args,
    source: str = "",
    throw_error: bool = True,
) -> None:
    """Like ``assert`` but the failure is logged at ERROR first.

    With ``throw_error=False`` the failure is only logged.
    """
    if condition:
        return
    message = LogMessage.create(text, *args, source=source, level=LogLevel.ERROR)
    registry.current().log(message)
    if throw_error:
        raise AssertionError(message.text)
