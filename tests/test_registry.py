import pytest

from core import registry
from core.distributor import Distributor
from core.errors import ConfigurationError
from core.levels import LogLevel
from core.view import ViewProjection


def test_current_is_lazy_and_stable():
    first = registry.current()
    assert isinstance(first, Distributor)
    assert registry.current() is first
    assert registry.current() is first


def test_default_current_uses_default_configuration():
    d = registry.current()
    assert d.level is LogLevel.INFORMATION
    assert d.console_output is True
    assert d.notify_all is True


def test_set_current_replaces_instance():
    replacement = Distributor(level=LogLevel.ERROR)
    registry.current()
    registry.set_current(replacement)
    assert registry.current() is replacement


def test_set_current_rejects_other_types():
    with pytest.raises(ConfigurationError):
        registry.set_current(object())


def test_reset_forgets_instance():
    first = registry.current()
    registry.reset()
    assert registry.current() is not first


def test_set_current_does_not_rebind_existing_views(make_message):
    """Views stay on the distributor they were bound to."""
    original = Distributor(console_output=False)
    registry.set_current(original)
    view = ViewProjection().activate()

    registry.set_current(Distributor(console_output=False))
    original.log(make_message("still here"))
    registry.current().log(make_message("elsewhere"))

    assert view.distributor is original
    assert [m.text for m in view.history] == ["still here"]
