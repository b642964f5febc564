import os
import weakref
from typing import Any, Optional, Sequence
from Xlib import X
from Xlib import error as xerror
from Xlib import display as xdisplay
from status_menu.core.watcher import StateWatcher

CURRENT_APP_WINDOW_ATOM = "_MB_CURRENT_APP_WINDOW"
TASK_SWITCHER_VALUE = 0xFFFFFFFF

_desktop_ref: Optional["weakref.ReferenceType[DesktopWatcher]"] = None


class DesktopWatcher(StateWatcher):
    """
    Follows the task switcher of the window manager.
    The window manager publishes the current application window on the root
    window; the special value 0xFFFFFFFF means the task switcher is shown.
    """

    ON_SIGNAL = "task-switcher-show"
    OFF_SIGNAL = "task-switcher-hide"

    def __init__(self, logger):
        super().__init__(logger, initial_state=False)
        self.display: Optional[xdisplay.Display] = None
        self.root: Any = None
        self.atom: Optional[int] = None
        self._watch_id: Optional[int] = None

    def is_task_switcher_visible(self) -> bool:
        return self._state

    def handle_property_value(self, values: Optional[Sequence[int]]) -> None:
        """
        Decodes a reply for the current application window property.
        Replies that do not carry exactly one item are ignored.
        """
        if values is None or len(values) != 1:
            return
        value = int(values[0]) & 0xFFFFFFFF
        self._set_state(value == TASK_SWITCHER_VALUE)

    def start(self) -> bool:
        """
        Installs the PropertyNotify filter on the X root window and services
        the X connection from the GLib main loop.
        Returns:
            True if the filter is active; False leaves the watcher inert.
        """
        if self.display is not None:
            return True
        if not os.getenv("DISPLAY"):
            self.logger.info(
                "No X display available. Task switcher tracking is disabled."
            )
            return False
        try:
            self.display = xdisplay.Display()
            self.root = self.display.screen().root
            self.atom = self.display.intern_atom(CURRENT_APP_WINDOW_ATOM)
            self.root.change_attributes(event_mask=X.PropertyChangeMask)
            self.display.flush()
        except (xerror.DisplayError, xerror.XError, OSError) as e:
            self.logger.warning(
                f"Could not connect to the X display. Task switcher tracking is disabled. {e}"
            )
            self.display = None
            self.root = None
            return False
        from gi.repository import GLib  # pyright: ignore

        self._watch_id = GLib.io_add_watch(
            self.display.fileno(),
            GLib.PRIORITY_DEFAULT,
            GLib.IOCondition.IN,
            self._on_x_events,
        )
        self.logger.debug("Task switcher property filter installed on root window.")
        return True

    def stop(self) -> None:
        if self._watch_id is not None:
            from gi.repository import GLib  # pyright: ignore

            GLib.source_remove(self._watch_id)
            self._watch_id = None
        if self.display is not None:
            try:
                self.display.close()
            except (xerror.DisplayError, OSError) as e:
                self.logger.debug(f"Error closing X display: {e}")
            self.display = None
            self.root = None

    def _on_x_events(self, *_) -> bool:
        if self.display is None:
            return False
        while self.display.pending_events():
            event = self.display.next_event()
            if event.type == X.PropertyNotify and event.atom == self.atom:
                self._read_property()
        return True

    def _read_property(self) -> None:
        try:
            prop = self.root.get_full_property(self.atom, X.AnyPropertyType)
        except xerror.XError as e:
            self.logger.debug(f"Failed to read {CURRENT_APP_WINDOW_ATOM}: {e}")
            return
        if prop is None or prop.format != 32:
            return
        self.handle_property_value(list(prop.value))


def get_desktop(logger) -> DesktopWatcher:
    """
    Returns the process-wide task switcher watcher, creating it if no other
    owner keeps one alive.
    """
    global _desktop_ref
    desktop = _desktop_ref() if _desktop_ref is not None else None
    if desktop is None:
        desktop = DesktopWatcher(logger)
        desktop.start()
        _desktop_ref = weakref.ref(desktop)
    return desktop
