from typing import Callable, Optional
import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gtk  # pyright: ignore
from status_menu.shared.layer_shell_helpers import (
    set_exclusive_keyboard,
    setup_layer_shell,
)

GRAB_WINDOW_NAMESPACE = "status-menu-grab"
# below the popup, which lives on OVERLAY
GRAB_WINDOW_LAYER = "TOP"


class GtkGrabBackend:
    """
    Emulates a pointer and keyboard grab for a popup window.

    The pointer "grab" is a transparent window covering the whole monitor on
    a lower layer than the popup: every click that misses the popup lands
    on it and is reported through `on_outside_click`. The keyboard grab puts
    the popup in exclusive keyboard mode on layer shell, or gives it focus
    otherwise.
    """

    def __init__(self, popup: Gtk.Window, on_outside_click: Callable[[], None]):
        self.popup = popup
        self.on_outside_click = on_outside_click
        self._catch_window: Optional[Gtk.Window] = None

    def _create_catch_window(self) -> Gtk.Window:
        window = Gtk.Window()
        window.set_decorated(False)
        window.add_css_class("status-menu-grab")
        window.set_application(self.popup.get_application())
        layered = setup_layer_shell(
            window,
            GRAB_WINDOW_NAMESPACE,
            layer=GRAB_WINDOW_LAYER,
            anchors=("TOP", "BOTTOM", "LEFT", "RIGHT"),
            exclusive_zone=-1,
        )
        if not layered:
            window.fullscreen()
        gesture = Gtk.GestureClick()
        gesture.set_button(0)
        gesture.connect("released", self._on_released)
        window.add_controller(gesture)
        return window

    def _on_released(self, gesture, n_press, x, y):
        self.on_outside_click()

    def grab_pointer(self) -> bool:
        if self._catch_window is None:
            self._catch_window = self._create_catch_window()
        self._catch_window.present()
        # the popup has to stay above the catch window
        self.popup.present()
        return self._catch_window.get_mapped()

    def grab_keyboard(self) -> bool:
        if set_exclusive_keyboard(self.popup, True):
            return True
        self.popup.present()
        return self.popup.get_mapped()

    def ungrab_pointer(self) -> None:
        if self._catch_window is not None:
            self._catch_window.set_visible(False)

    def ungrab_keyboard(self) -> None:
        set_exclusive_keyboard(self.popup, False)

    def destroy(self) -> None:
        if self._catch_window is not None:
            self._catch_window.destroy()
            self._catch_window = None
