import os
from datetime import datetime, timedelta

import pytest

# Qt widgets in tests must not need a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core import registry
from core.levels import LogLevel
from core.message import LogMessage


class RecordingSink:
    """RowSink that records every call made by a ViewProjection."""

    def __init__(self):
        self.rendered = []
        self.clears = 0
        self.selected_rows = []
        self.options = []

    def render_rows(self, rows):
        self.rendered.append(tuple(rows))

    def clear_rows(self):
        self.clears += 1

    def select_row(self, index):
        self.selected_rows.append(index)

    def sync_options(self, options):
        self.options.append(options)

    @property
    def last_rows(self):
        return self.rendered[-1] if self.rendered else ()


@pytest.fixture(autouse=True)
def fresh_registry():
    """Every test starts without a current distributor."""
    registry.reset()
    yield
    registry.reset()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_message():
    """Build messages with distinct, increasing timestamps."""
    base = datetime(2024, 5, 17, 9, 30, 0)
    counter = {"n": 0}

    def _make(text="message", level=LogLevel.INFORMATION, source="test", timestamp=None):
        if timestamp is None:
            timestamp = base + timedelta(seconds=counter["n"])
            counter["n"] += 1
        return LogMessage(source=source, timestamp=timestamp, level=level, text=text)

    return _make
