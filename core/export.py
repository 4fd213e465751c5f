"""Batch operations over ordered sequences of messages.

Each helper applies the single-message operation to every element, in order.
When no distributor is given, the registry's current one is used for
formatting (its level never filters anything here).
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from core import registry
from core.distributor import Distributor
from core.logging_utils import get_logger
from core.message import LogMessage

logger = get_logger(__name__)


def _resolve(distributor: Optional[Distributor]) -> Distributor:
    return distributor if distributor is not None else registry.current()


def log_messages(messages: Iterable[LogMessage], distributor: Optional[Distributor] = None) -> None:
    """Pass each message through ``distributor.log``."""
    target = _resolve(distributor)
    for message in messages:
        target.log(message)


def format_messages(messages: Iterable[LogMessage], distributor: Optional[Distributor] = None) -> list[str]:
    return _resolve(distributor).format_all(messages)


def print_messages(messages: Iterable[LogMessage], distributor: Optional[Distributor] = None) -> None:
    _resolve(distributor).print_messages(messages)


def save_messages(
    messages: Iterable[LogMessage],
    path: Union[str, Path],
    distributor: Optional[Distributor] = None,
) -> Path:
    """Write one formatted line per message to ``path``, replacing its content."""
    path = Path(path)
    lines = format_messages(messages, distributor)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
    logger.info("Saved %d messages to %s", len(lines), path)
    return path
