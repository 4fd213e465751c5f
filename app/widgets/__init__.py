"""Convenience imports for the app widgets package."""

from .log_view import LogView

__all__ = [
    "LogView",
]
