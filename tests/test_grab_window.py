from unittest.mock import MagicMock
import pytest

gi = pytest.importorskip("gi")
try:
    gi.require_version("Gtk", "4.0")
    from gi.repository import Gtk  # pyright: ignore
except (ImportError, ValueError):
    pytest.skip("GTK 4 is not available", allow_module_level=True)

from status_menu.shared.layer_shell_helpers import LAYERS  # noqa: E402
from status_menu.ui import grab_window  # noqa: E402
from status_menu.ui.grab_window import GRAB_WINDOW_LAYER, GtkGrabBackend  # noqa: E402
from status_menu.ui.status_menu import STATUS_MENU_LAYER  # noqa: E402


def test_catch_window_stacks_below_menu():
    assert GRAB_WINDOW_LAYER in LAYERS
    assert STATUS_MENU_LAYER in LAYERS
    assert LAYERS.index(GRAB_WINDOW_LAYER) < LAYERS.index(STATUS_MENU_LAYER)


def test_catch_window_uses_grab_layer(monkeypatch):
    if not Gtk.init_check():
        pytest.skip("no display to initialize GTK on")
    layers = {}

    def fake_setup(window, namespace, layer="TOP", **kwargs):
        layers[namespace] = layer
        return True

    monkeypatch.setattr(grab_window, "setup_layer_shell", fake_setup)
    popup = Gtk.Window()
    backend = GtkGrabBackend(popup, MagicMock())
    window = backend._create_catch_window()
    try:
        assert layers == {grab_window.GRAB_WINDOW_NAMESPACE: GRAB_WINDOW_LAYER}
    finally:
        window.destroy()
        popup.destroy()


def test_release_on_catch_window_reports_outside_click():
    on_outside_click = MagicMock()
    backend = GtkGrabBackend(MagicMock(), on_outside_click)
    backend._on_released(None, 1, 10.0, 10.0)
    on_outside_click.assert_called_once_with()
