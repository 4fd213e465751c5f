"""
Qt signals shared by live log windows.

Widgets emit here so that other parts of an application can react to the
user's selection without holding a reference to a particular LogView.
"""

from PySide6.QtCore import QObject, Signal


class LogViewSignals(QObject):
    """Centralized signals for live log views."""

    message_selected = Signal(object)  # LogMessage or None
    view_closed = Signal()


# Global signal instance
_log_view_signals = None


def get_log_view_signals() -> LogViewSignals:
    """Get the global log view signals instance."""
    global _log_view_signals
    if _log_view_signals is None:
        _log_view_signals = LogViewSignals()
    return _log_view_signals
