from datetime import datetime

import pytest

from core import registry
from core.distributor import Distributor
from core.errors import ConfigurationError, ViewStateError
from core.events import Notification
from core.levels import LogLevel, TimeFormat
from core.view import ViewOptions, ViewProjection, render_rows

ALL_LEVELS = [LogLevel.DEBUG, LogLevel.INFORMATION, LogLevel.WARNING, LogLevel.ERROR]


@pytest.fixture
def distributor():
    return Distributor(console_output=False, notify_all=True)


@pytest.fixture
def view(distributor, sink):
    projection = ViewProjection(sink)
    projection.bind(distributor)
    return projection


def _log_all_levels(distributor, make_message):
    messages = [make_message(level.label.lower(), level=level) for level in ALL_LEVELS]
    for message in messages:
        distributor.log(message)
    return messages


class TestBinding:
    def test_initial_view_is_unbound(self):
        view = ViewProjection()
        assert view.distributor is None
        assert view.is_bound is False

    def test_activate_binds_to_current(self):
        view = ViewProjection().activate()
        assert view.distributor is registry.current()
        assert len(registry.current().subscriptions) == 1

    def test_activate_twice_keeps_single_subscription(self):
        view = ViewProjection().activate()
        view.activate()
        assert len(registry.current().subscriptions) == 1

    def test_rebind_clears_and_stops_old_deliveries(self, view, distributor, sink, make_message):
        """Scenario: rebinding empties history and ignores the old distributor."""
        _log_all_levels(distributor, make_message)
        assert len(view.history) == 4

        replacement = Distributor(console_output=False)
        view.distributor = replacement

        assert view.history == ()
        assert view.rows == ()
        assert sink.clears >= 1
        assert distributor.subscriptions == ()
        assert len(replacement.subscriptions) == 1

        distributor.log(make_message("old", level=LogLevel.ERROR))
        assert view.history == ()

        replacement.log(make_message("new", level=LogLevel.ERROR))
        assert [m.text for m in view.history] == ["new"]

    def test_rebinding_same_distributor_is_noop(self, view, distributor, sink, make_message):
        _log_all_levels(distributor, make_message)
        clears = sink.clears
        subscription = distributor.subscriptions[0]

        view.distributor = distributor

        assert len(view.history) == 4
        assert sink.clears == clears
        assert distributor.subscriptions == (subscription,)

    def test_rebind_clears_selection(self, view, distributor, make_message):
        changes = []
        view.add_selection_listener(changes.append)
        messages = _log_all_levels(distributor, make_message)
        view.select(messages[-1])

        view.bind(Distributor(console_output=False))

        assert view.selection is None
        assert changes == [messages[-1], None]

    def test_bind_rejects_non_distributors(self, view):
        with pytest.raises(ConfigurationError):
            view.bind("not a distributor")

    def test_dispose_unsubscribes(self, view, distributor, make_message):
        view.dispose()
        view.dispose()
        distributor.log(make_message())

        assert view.disposed is True
        assert distributor.subscriptions == ()
        assert view.history == ()
        with pytest.raises(ViewStateError):
            view.bind(Distributor())

    def test_rebind_during_publish_drops_in_flight_message(self, distributor, sink, make_message):
        """An earlier subscriber moving the view away means the view never sees that message."""
        replacement = Distributor(console_output=False)
        view = ViewProjection(sink)
        # Subscribed ahead of the view so it runs first during publish
        distributor.subscribe(lambda n: view.bind(replacement))
        view.bind(distributor)

        distributor.log(make_message("in flight"))

        assert view.distributor is replacement
        assert view.history == ()
        assert view.rows == ()
        assert len(distributor.subscriptions) == 1

        replacement.log(make_message("new"))
        assert [m.text for m in view.history] == ["new"]

    def test_context_manager_activates_and_disposes(self, make_message):
        with ViewProjection() as view:
            registry.current().log(make_message("seen"))
        registry.current().log(make_message("unseen"))

        assert [m.text for m in view.history] == ["seen"]
        assert registry.current().subscriptions == ()


class TestFiltering:
    def test_history_keeps_everything_rows_are_filtered(self, view, distributor, make_message):
        """Scenario: four levels logged, view filter Warning shows two rows."""
        view.set_log_level(LogLevel.WARNING)
        messages = _log_all_levels(distributor, make_message)

        assert list(view.history) == messages
        assert [row.message for row in view.rows] == messages[2:]

    def test_relaxing_filter_reveals_history_without_new_notifications(self, view, distributor, make_message):
        """Scenario: lowering the filter shows all four rows in arrival order."""
        view.set_log_level(LogLevel.WARNING)
        messages = _log_all_levels(distributor, make_message)
        delivered = []
        distributor.subscribe(delivered.append)

        view.set_log_level(LogLevel.DEBUG)

        assert [row.message for row in view.rows] == messages
        assert delivered == []

    def test_view_filter_is_independent_of_distributor_level(self, sink, make_message):
        distributor = Distributor(level=LogLevel.ERROR, console_output=False, notify_all=True)
        view = ViewProjection(sink, log_level=LogLevel.DEBUG)
        view.bind(distributor)

        _log_all_levels(distributor, make_message)

        assert len(view.rows) == 4
        assert distributor.level is LogLevel.ERROR

    def test_notify_filtered_only_limits_history(self, sink, make_message):
        distributor = Distributor(level=LogLevel.WARNING, console_output=False, notify_all=False)
        view = ViewProjection(sink, log_level=LogLevel.DEBUG)
        view.bind(distributor)

        _log_all_levels(distributor, make_message)

        assert [m.level for m in view.history] == [LogLevel.WARNING, LogLevel.ERROR]

    def test_sink_receives_rendered_rows(self, view, distributor, sink, make_message):
        _log_all_levels(distributor, make_message)
        assert sink.last_rows == view.rows
        assert len(sink.last_rows) == 3

    def test_set_same_level_does_not_recompute(self, view, sink):
        renders = len(sink.rendered)
        view.set_log_level(LogLevel.INFORMATION)
        assert len(sink.rendered) == renders

    def test_log_level_property_and_validation(self, view):
        view.log_level = "error"
        assert view.log_level is LogLevel.ERROR
        with pytest.raises(ConfigurationError):
            view.set_log_level(9)
        assert view.log_level is LogLevel.ERROR

    def test_recompute_is_idempotent(self, view, distributor, make_message):
        _log_all_levels(distributor, make_message)
        history = view.history
        rows = view.rows
        view.recompute()
        view.recompute()
        assert view.history == history
        assert view.rows == rows

    def test_clear_empties_history_only_locally(self, view, distributor, sink, make_message):
        other = ViewProjection()
        other.bind(distributor)
        _log_all_levels(distributor, make_message)

        view.clear()

        assert view.history == ()
        assert view.rows == ()
        assert len(other.history) == 4
        assert view.distributor is distributor

        distributor.log(make_message("after clear"))
        assert [m.text for m in view.history] == ["after clear"]


class TestDisplayOptions:
    def test_cells_follow_options(self, view, distributor):
        distributor.log_at_level(LogLevel.WARNING, "disk low", source="monitor")
        row = view.rows[0]
        ts = view.history[0].timestamp

        assert row.cells == ("Warning", "monitor", ts.strftime("%H:%M:%S"), "disk low")

        view.show_source = False
        assert view.rows[0].cells == ("Warning", ts.strftime("%H:%M:%S"), "disk low")

        view.time_format = "full"
        assert view.rows[0].cells == ("Warning", ts.strftime("%Y-%m-%dT%H:%M:%S"), "disk low")

        view.time_format = TimeFormat.NONE
        assert view.rows[0].cells == ("Warning", "disk low")
        assert view.options.columns == ("Level", "Message")

    def test_invalid_options_raise(self, view):
        with pytest.raises(ConfigurationError):
            view.show_source = "no"
        with pytest.raises(ConfigurationError):
            view.time_format = "iso"
        with pytest.raises(ConfigurationError):
            ViewProjection(time_format="sometimes")

    def test_option_changes_sync_to_sink(self, view, sink):
        synced = len(sink.options)
        view.allow_clear = False
        assert len(sink.options) == synced + 1
        assert sink.options[-1].allow_clear is False

    def test_rendering_is_pure(self, make_message):
        """Identical history and options give identical rows, whatever the delivery timing."""
        history = [make_message(level=level) for level in ALL_LEVELS]
        options = ViewOptions(log_level=LogLevel.INFORMATION, show_source=False)

        first = ViewProjection(log_level=LogLevel.INFORMATION, show_source=False)
        second = ViewProjection(log_level=LogLevel.DEBUG, show_source=False)
        for message in history:
            first.on_notification(Notification(message))
        for message in history:
            second.on_notification(Notification(message))
        second.set_log_level(LogLevel.INFORMATION)

        assert first.rows == second.rows == render_rows(history, options)


class TestSelection:
    def test_select_fires_once_per_change(self, view, distributor, sink, make_message):
        changes = []
        view.add_selection_listener(changes.append)
        messages = _log_all_levels(distributor, make_message)

        view.select(messages[2])
        view.select(messages[2])

        assert view.selection == messages[2]
        assert view.selected_index == 1
        assert sink.selected_rows[-1] == 1
        assert changes == [messages[2]]

    def test_select_none_clears(self, view, distributor, make_message):
        changes = []
        view.add_selection_listener(changes.append)
        messages = _log_all_levels(distributor, make_message)

        view.select(None)
        assert changes == []

        view.select(messages[3])
        view.select(None)
        view.select(None)
        assert view.selection is None
        assert changes == [messages[3], None]

    def test_select_unknown_message_clears(self, view, distributor, make_message):
        messages = _log_all_levels(distributor, make_message)
        view.select(messages[3])

        view.select(make_message("never logged"))

        assert view.selection is None

    def test_filter_hiding_selection_clears_it(self, view, distributor, make_message):
        changes = []
        view.add_selection_listener(changes.append)
        messages = _log_all_levels(distributor, make_message)
        view.select(messages[1])

        view.set_log_level(LogLevel.ERROR)

        assert view.selection is None
        assert changes == [messages[1], None]

    def test_selection_survives_filter_change_when_visible(self, view, distributor, sink, make_message):
        changes = []
        view.add_selection_listener(changes.append)
        messages = _log_all_levels(distributor, make_message)
        view.select(messages[3])

        view.set_log_level(LogLevel.DEBUG)

        assert view.selection == messages[3]
        assert view.selected_index == 3
        assert sink.selected_rows[-1] == 3
        assert changes == [messages[3]]

    def test_row_activation_selects_visible_row(self, view, distributor, make_message):
        messages = _log_all_levels(distributor, make_message)

        view.on_row_activated(0)
        assert view.selection == messages[1]

        view.on_row_activated(None)
        assert view.selection is None

        view.on_row_activated(99)
        assert view.selection is None

    def test_clear_drops_selection(self, view, distributor, make_message):
        messages = _log_all_levels(distributor, make_message)
        view.select(messages[2])
        view.clear()
        assert view.selection is None

    def test_duplicates_resolve_to_first_match(self, view, distributor, make_message):
        ts = datetime(2024, 5, 17, 10, 0, 0)
        first = make_message("dup", timestamp=ts)
        second = make_message("dup", timestamp=ts)
        distributor.log(first)
        distributor.log(second)

        view.select(second)

        assert view.selection is first
        assert view.selected_index == 0

    def test_selection_survives_display_option_changes(self, view, distributor, sink, make_message):
        changes = []
        view.add_selection_listener(changes.append)
        messages = _log_all_levels(distributor, make_message)
        view.select(messages[2])

        view.show_source = False
        view.time_format = "none"

        assert view.selection == messages[2]
        assert view.selected_index == 1
        assert view.rows[1].cells == ("Warning", "warning")
        assert sink.selected_rows[-1] == 1
        assert changes == [messages[2]]

    def test_remove_selection_listener(self, view, distributor, make_message):
        changes = []
        view.add_selection_listener(changes.append)
        view.remove_selection_listener(changes.append)
        messages = _log_all_levels(distributor, make_message)
        view.select(messages[2])
        assert changes == []
