"""Process-wide slot holding the current Distributor.

The slot is plain module state without locking; callers sharing it across
threads must synchronize themselves.
"""

from __future__ import annotations

from typing import Optional

from core.distributor import Distributor
from core.errors import ConfigurationError
from core.logging_utils import get_logger

logger = get_logger(__name__)

_current: Optional[Distributor] = None


def current() -> Distributor:
    """Return the current distributor, creating a default one on first use."""
    global _current
    if _current is None:
        from config.settings import settings

        _current = Distributor.from_settings(settings)
        logger.debug("Created default distributor %r", _current)
    return _current


def set_current(distributor: Distributor) -> None:
    """Replace the current distributor.

    Views already bound to the previous instance stay bound to it.
    """
    global _current
    if not isinstance(distributor, Distributor):
        raise ConfigurationError(f"Expected a Distributor, got {type(distributor).__name__}")
    if _current is not None and _current is not distributor:
        logger.info("Replacing current distributor %r with %r", _current, distributor)
    _current = distributor


def reset() -> None:
    """Forget the current distributor so the next current() builds a new one."""
    global _current
    _current = None
