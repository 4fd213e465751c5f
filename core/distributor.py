"""The log distribution core.

A Distributor filters messages against its threshold level, optionally
prints them to the console and publishes them synchronously to subscribers.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from core.errors import ConfigurationError, ConstructionError, SubscriberError
from core.events import Callback, Notification, Subscription
from core.levels import COMPACT_TIME_FORMAT, LogLevel
from core.logging_utils import get_logger
from core.message import LogMessage

logger = get_logger(__name__)

LINE_FORMAT = "| %-12s | %s | %-11s | %s"

ProcessHook = Callable[[LogMessage, bool], None]
ConsoleSink = Callable[[str], None]


class LogPolicy:
    """Filtering and formatting strategy used by a Distributor.

    Pass a subclass instance to ``Distributor(policy=...)`` to change how
    messages are accepted or rendered.
    """

    def accepts(self, message: LogMessage, threshold: LogLevel) -> bool:
        return message.level >= threshold

    def format(self, message: LogMessage) -> str:
        return LINE_FORMAT % (
            message.source,
            message.timestamp.strftime(COMPACT_TIME_FORMAT),
            message.level.label,
            message.text,
        )


class DistributorConfig(BaseModel):
    """Validated runtime options of a Distributor."""

    model_config = ConfigDict(strict=True, validate_assignment=True)

    level: LogLevel = LogLevel.INFORMATION
    console_output: bool = True
    notify_all: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, v):
        return LogLevel.parse(v)


def _print_line(line: str) -> None:
    print(line)


class Distributor:
    """Threshold filter, console printer and synchronous publisher."""

    def __init__(
        self,
        *,
        level: LogLevel = LogLevel.INFORMATION,
        console_output: bool = True,
        notify_all: bool = True,
        policy: Optional[LogPolicy] = None,
        process: Optional[ProcessHook] = None,
        console: Optional[ConsoleSink] = None,
    ):
        try:
            self._config = DistributorConfig(
                level=level, console_output=console_output, notify_all=notify_all
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid distributor configuration: {exc}") from exc
        if process is not None and not callable(process):
            raise ConfigurationError("process hook must be callable")
        if console is not None and not callable(console):
            raise ConfigurationError("console sink must be callable")
        if policy is not None and not isinstance(policy, LogPolicy):
            raise ConfigurationError(f"policy must be a LogPolicy, got {type(policy).__name__}")
        self._policy = policy if policy is not None else LogPolicy()
        self._process = process
        self._console = console or _print_line
        self._subscriptions: List[Subscription] = []

    @classmethod
    def from_settings(cls, settings) -> "Distributor":
        """Build a distributor from a config.settings.Settings instance."""
        return cls(
            level=settings.level,
            console_output=settings.console_output,
            notify_all=settings.notify_all,
        )

    def __repr__(self) -> str:
        return (
            f"Distributor(level={self.level.label}, console_output={self.console_output}, "
            f"notify_all={self.notify_all}, subscribers={len(self._subscriptions)})"
        )

    # Configuration

    def _assign(self, name: str, value) -> None:
        try:
            setattr(self._config, name, value)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid value for {name}: {value!r}") from exc

    @property
    def level(self) -> LogLevel:
        return self._config.level

    @level.setter
    def level(self, value) -> None:
        self._assign("level", value)

    @property
    def console_output(self) -> bool:
        return self._config.console_output

    @console_output.setter
    def console_output(self, value) -> None:
        self._assign("console_output", value)

    @property
    def notify_all(self) -> bool:
        return self._config.notify_all

    @notify_all.setter
    def notify_all(self, value) -> None:
        self._assign("notify_all", value)

    @property
    def policy(self) -> LogPolicy:
        return self._policy

    # Subscribers

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        return tuple(self._subscriptions)

    def subscribe(self, callback: Callback) -> Subscription:
        """Register ``callback``; it receives a Notification per published message."""
        if not callable(callback):
            raise ConfigurationError(f"Subscriber must be callable, got {callback!r}")
        subscription = Subscription(distributor=self, callback=callback)
        self._subscriptions.append(subscription)
        logger.debug("Subscribed %r (%d total)", callback, len(self._subscriptions))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown or already removed handles are ignored."""
        for i, existing in enumerate(self._subscriptions):
            if existing is subscription:
                del self._subscriptions[i]
                logger.debug("Unsubscribed %r (%d left)", subscription.callback, len(self._subscriptions))
                break
        if subscription.distributor is self:
            subscription.active = False

    # Distribution

    def log(self, message: LogMessage) -> None:
        """Filter, print and publish a single message."""
        if not isinstance(message, LogMessage):
            raise ConstructionError(f"Expected a LogMessage, got {type(message).__name__}")

        filtered = bool(self._policy.accepts(message, self.level))

        if self._process is not None:
            self._process(message, filtered)

        if filtered and self.console_output:
            self._console(self._policy.format(message))

        if filtered or self.notify_all:
            self._publish(Notification(message))

    def _publish(self, notification: Notification) -> None:
        # Iterate over a snapshot so callbacks may unsubscribe themselves.
        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            try:
                subscription.callback(notification)
            except Exception as exc:
                raise SubscriberError(
                    f"Subscriber {subscription.callback!r} failed: {exc}", subscription
                ) from exc

    def log_at_level(self, level: LogLevel, text: str, *args, source: str = "") -> None:
        """Build a message at ``level`` from ``text % args`` and log it."""
        try:
            level = LogLevel.parse(level)
        except ConfigurationError as exc:
            raise ConstructionError(str(exc)) from exc
        self.log(LogMessage.create(text, *args, source=source, level=level))

    # Batch helpers

    def format(self, message: LogMessage) -> str:
        return self._policy.format(message)

    def format_all(self, messages: Iterable[LogMessage]) -> list[str]:
        return [self._policy.format(message) for message in messages]

    def print_messages(self, messages: Iterable[LogMessage]) -> None:
        """Write every message to the console sink, regardless of level."""
        for line in self.format_all(messages):
            self._console(line)
