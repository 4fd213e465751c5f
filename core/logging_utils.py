"""Diagnostics logging for livelog internals.

This is separate from the Distributor's own console sink: it reports what
the library is doing (subscriptions, rebinds, registry changes), not the
messages it distributes.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional


class HumanFormatter(logging.Formatter):
    """Minimal, eye-friendly formatter for console output."""

    SYMBOLS = {
        "INFO": "✓",
        "WARNING": "⚠",
        "ERROR": "✗",
        "CRITICAL": "❗",
        "DEBUG": "…",
    }

    def format(self, record: logging.LogRecord) -> str:
        symbol = self.SYMBOLS.get(record.levelname, record.levelname[:1])
        short_name = record.name.split(".")[-1] if record.name else ""
        message = record.getMessage()

        if short_name and short_name != "root":
            prefix = f"{symbol} [{short_name}]"
        else:
            prefix = symbol

        return f"{prefix} {message}"


LOGGER_NAMESPACE = "livelog"


@lru_cache(maxsize=1)
def configure_logging(level: Optional[str] = None) -> None:
    """Configure the livelog diagnostics logger once.

    The level can be supplied explicitly or via settings.diagnostics_level
    (env LIVELOG_DIAGNOSTICS_LEVEL, defaults to WARNING). Subsequent calls
    are no-ops.
    """
    from config.settings import settings

    env_level = level or settings.diagnostics_level
    numeric_level = getattr(logging, str(env_level).upper(), logging.WARNING)

    handler = logging.StreamHandler()
    handler.setLevel(numeric_level)
    handler.setFormatter(HumanFormatter())

    root = logging.getLogger(LOGGER_NAMESPACE)
    root.handlers.clear()
    root.setLevel(numeric_level)
    root.addHandler(handler)
    # Own handler only; a host app's root handler would print every line again
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a module-specific logger under the livelog namespace."""
    configure_logging()
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
