"""Exception types raised by the log distribution core."""

from __future__ import annotations


class LiveLogError(Exception):
    """Base class for all livelog errors."""


class ConfigurationError(LiveLogError, ValueError):
    """An option was assigned a value outside its domain."""


class ConstructionError(LiveLogError, ValueError):
    """A LogMessage could not be built from the given arguments."""


class SubscriberError(LiveLogError):
    """A subscriber raised while a notification was being delivered."""

    def __init__(self, message: str, subscription=None):
        super().__init__(message)
        self.subscription = subscription


class ViewStateError(LiveLogError):
    """Operation not allowed in the view projection's current state."""


class LoggedError(LiveLogError):
    """Raised by core.api.error after the message has been logged."""
