import pytest

gi = pytest.importorskip("gi")
try:
    gi.require_version("Gtk", "4.0")
    from gi.repository import Gtk  # noqa: F401
except (ImportError, ValueError):
    pytest.skip("GTK 4 is not available", allow_module_level=True)

from status_menu.ui.status_area import claim_permanent_slot  # noqa: E402


def test_free_slot_is_granted(logger):
    assert claim_permanent_slot("Battery", "battery", [None, "Clock"], logger) == "Battery"
    logger.warning.assert_not_called()


def test_taken_slot_sends_item_to_icon_grid(logger):
    assert claim_permanent_slot("Battery", "battery2", [None, "Battery"], logger) is None
    logger.warning.assert_called_once()
    assert "battery2" in logger.warning.call_args[0][0]


def test_item_without_slot(logger):
    assert claim_permanent_slot(None, "wifi", [None, "Clock"], logger) is None
    logger.warning.assert_not_called()
