"""Live view projection of a Distributor's message stream.

A ViewProjection subscribes to one Distributor at a time, keeps every
message it receives, and renders the subset that passes its own level
filter. Rendering goes to a RowSink (for example app.widgets.log_view.LogView);
the projection never depends on widget internals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from core import registry
from core.distributor import Distributor
from core.errors import ConfigurationError, ViewStateError
from core.events import Notification, Subscription
from core.levels import LogLevel, TimeFormat
from core.logging_utils import get_logger
from core.message import LogMessage

logger = get_logger(__name__)

SelectionListener = Callable[[Optional[LogMessage]], None]


class ViewOptions(BaseModel):
    """Filter and display options of a view; validated on assignment."""

    model_config = ConfigDict(strict=True, validate_assignment=True)

    log_level: LogLevel = LogLevel.INFORMATION
    show_source: bool = True
    time_format: TimeFormat = TimeFormat.COMPACT
    allow_clear: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def _coerce_level(cls, v):
        return LogLevel.parse(v)

    @field_validator("time_format", mode="before")
    @classmethod
    def _coerce_time_format(cls, v):
        return TimeFormat.parse(v)

    @property
    def columns(self) -> tuple[str, ...]:
        columns = ["Level"]
        if self.show_source:
            columns.append("Source")
        if self.time_format is not TimeFormat.NONE:
            columns.append("Time")
        columns.append("Message")
        return tuple(columns)


@dataclass(frozen=True)
class LogRow:
    """One rendered table row. Hidden columns are None."""

    message: LogMessage
    source: Optional[str]
    time: Optional[str]

    @property
    def level(self) -> LogLevel:
        return self.message.level

    @property
    def text(self) -> str:
        return self.message.text

    @property
    def cells(self) -> tuple[str, ...]:
        values = [self.level.label]
        if self.source is not None:
            values.append(self.source)
        if self.time is not None:
            values.append(self.time)
        values.append(self.text)
        return tuple(values)


def render_rows(history: Sequence[LogMessage], options: ViewOptions) -> tuple[LogRow, ...]:
    """Rows visible under ``options``, in arrival order."""
    return tuple(
        LogRow(
            message=message,
            source=message.source if options.show_source else None,
            time=options.time_format.render(message.timestamp),
        )
        for message in history
        if message.level >= options.log_level
    )


class RowSink(Protocol):
    """What a rendering widget must provide to a ViewProjection."""

    def render_rows(self, rows: Sequence[LogRow]) -> None:
        """Replace the displayed rows."""

    def clear_rows(self) -> None:
        """Remove all displayed rows."""

    def select_row(self, index: Optional[int]) -> None:
        """Highlight the row at ``index``, or nothing when None."""

    def sync_options(self, options: ViewOptions) -> None:
        """Reflect the projection's options in the widget controls."""


class ViewProjection:
    """Subscriber keeping its own history, level filter and selection."""

    def __init__(
        self,
        sink: Optional[RowSink] = None,
        *,
        log_level: LogLevel = LogLevel.INFORMATION,
        show_source: bool = True,
        time_format: TimeFormat = TimeFormat.COMPACT,
        allow_clear: bool = True,
    ):
        try:
            self._options = ViewOptions(
                log_level=log_level,
                show_source=show_source,
                time_format=time_format,
                allow_clear=allow_clear,
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid view options: {exc}") from exc

        self._sink = sink
        self._distributor: Optional[Distributor] = None
        self._subscription: Optional[Subscription] = None
        self._history: List[LogMessage] = []
        self._rows: tuple[LogRow, ...] = ()
        self._selection: Optional[LogMessage] = None
        self._selection_listeners: List[SelectionListener] = []
        self._disposed = False

        if self._sink is not None:
            self._sink.sync_options(self.options)

    @classmethod
    def from_settings(cls, settings, sink: Optional[RowSink] = None) -> "ViewProjection":
        return cls(
            sink,
            log_level=settings.view_log_level,
            show_source=settings.view_show_source,
            time_format=settings.view_time_format,
            allow_clear=settings.view_allow_clear,
        )

    def __enter__(self) -> "ViewProjection":
        return self.activate()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # State

    @property
    def distributor(self) -> Optional[Distributor]:
        return self._distributor

    @distributor.setter
    def distributor(self, distributor: Distributor) -> None:
        self.bind(distributor)

    @property
    def is_bound(self) -> bool:
        return self._subscription is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def history(self) -> tuple[LogMessage, ...]:
        return tuple(self._history)

    @property
    def rows(self) -> tuple[LogRow, ...]:
        return self._rows

    @property
    def options(self) -> ViewOptions:
        return self._options.model_copy()

    @property
    def selection(self) -> Optional[LogMessage]:
        return self._selection

    @property
    def selected_index(self) -> Optional[int]:
        """Row index of the selection, or None when nothing visible is selected."""
        if self._selection is None:
            return None
        return self._row_index(self._selection)

    # Binding

    def activate(self) -> "ViewProjection":
        """Bind to the registry's current distributor if not bound yet."""
        if self._distributor is None:
            self.bind(registry.current())
        return self

    def bind(self, distributor: Distributor) -> None:
        """Switch to ``distributor``, discarding history from the previous one.

        Binding the distributor that is already bound does nothing.
        """
        if self._disposed:
            raise ViewStateError("Cannot bind a disposed view")
        if not isinstance(distributor, Distributor):
            raise ConfigurationError(f"Expected a Distributor, got {type(distributor).__name__}")
        if distributor is self._distributor:
            return

        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        self._clear_contents()
        self._subscription = distributor.subscribe(self.on_notification)
        logger.debug("View %x rebound from %r to %r", id(self), self._distributor, distributor)
        self._distributor = distributor

    def dispose(self) -> None:
        """Release the subscription. The view cannot be bound again afterwards."""
        if self._disposed:
            return
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
        self._disposed = True

    # Incoming messages

    def on_notification(self, notification: Notification) -> None:
        self._history.append(notification.message)
        self.recompute()

    def recompute(self) -> None:
        """Rebuild rows from history and options, then re-resolve the selection."""
        self._rows = render_rows(self._history, self._options)
        if self._sink is not None:
            self._sink.render_rows(self._rows)

        if self._selection is not None:
            index = self._row_index(self._selection)
            if index is None:
                self._set_selection(None)
            elif self._sink is not None:
                self._sink.select_row(index)

    def clear(self) -> None:
        """Empty history and rows. The bound distributor is not affected."""
        self._clear_contents()

    def _clear_contents(self) -> None:
        self._history.clear()
        self._rows = ()
        if self._sink is not None:
            self._sink.clear_rows()
        self._set_selection(None)

    # Options

    def _set_option(self, name: str, value) -> bool:
        old = getattr(self._options, name)
        try:
            setattr(self._options, name, value)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid value for {name}: {value!r}") from exc
        if getattr(self._options, name) == old:
            return False
        if self._sink is not None:
            self._sink.sync_options(self.options)
        return True

    @property
    def log_level(self) -> LogLevel:
        return self._options.log_level

    @log_level.setter
    def log_level(self, level) -> None:
        self.set_log_level(level)

    def set_log_level(self, level) -> None:
        """Change the local filter; history and subscriptions are untouched."""
        if self._set_option("log_level", level):
            self.recompute()

    @property
    def show_source(self) -> bool:
        return self._options.show_source

    @show_source.setter
    def show_source(self, flag: bool) -> None:
        if self._set_option("show_source", flag):
            self.recompute()

    @property
    def time_format(self) -> TimeFormat:
        return self._options.time_format

    @time_format.setter
    def time_format(self, mode) -> None:
        if self._set_option("time_format", mode):
            self.recompute()

    @property
    def allow_clear(self) -> bool:
        return self._options.allow_clear

    @allow_clear.setter
    def allow_clear(self, flag: bool) -> None:
        self._set_option("allow_clear", flag)

    # Selection

    def add_selection_listener(self, callback: SelectionListener) -> None:
        """Register a callback receiving the new selection (or None)."""
        if callback not in self._selection_listeners:
            self._selection_listeners.append(callback)

    def remove_selection_listener(self, callback: SelectionListener) -> None:
        if callback in self._selection_listeners:
            self._selection_listeners.remove(callback)

    def select(self, message: Optional[LogMessage]) -> None:
        """Select the first history entry equal to ``message``.

        Selecting None, or a message not in history, clears the selection.
        Listeners fire only when the selection actually changes.
        """
        found = self._find(message) if message is not None else None
        if found is None:
            self._set_selection(None)
            return

        if self._sink is not None:
            self._sink.select_row(self._row_index(found))
        if found != self._selection:
            self._selection = found
            self._fire_selection_changed()

    def on_row_activated(self, index: Optional[int]) -> None:
        """Upcall from the sink when the user picks a row (None to deselect)."""
        if index is None or not 0 <= index < len(self._rows):
            self.select(None)
        else:
            self.select(self._rows[index].message)

    def _set_selection(self, message: Optional[LogMessage]) -> None:
        if message is None and self._selection is None:
            return
        self._selection = message
        if self._sink is not None:
            self._sink.select_row(None if message is None else self._row_index(message))
        self._fire_selection_changed()

    def _fire_selection_changed(self) -> None:
        for callback in list(self._selection_listeners):
            callback(self._selection)

    def _find(self, message: LogMessage) -> Optional[LogMessage]:
        for candidate in self._history:
            if candidate == message:
                return candidate
        return None

    def _row_index(self, message: LogMessage) -> Optional[int]:
        for i, row in enumerate(self._rows):
            if row.message == message:
                return i
        return None
