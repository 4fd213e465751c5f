"""Envelopes handed to subscribers and subscription handles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from core.message import LogMessage

if TYPE_CHECKING:
    from core.distributor import Distributor


@dataclass(frozen=True)
class Notification:
    """Carries one delivered LogMessage to a subscriber."""

    message: LogMessage


Callback = Callable[[Notification], None]


@dataclass(eq=False)
class Subscription:
    """Handle returned by Distributor.subscribe.

    Closing the handle removes the callback; closing twice is a no-op.
    """

    distributor: "Distributor"
    callback: Callback
    active: bool = field(default=True)

    def close(self) -> None:
        self.distributor.unsubscribe(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
