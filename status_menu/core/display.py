import weakref
from typing import Any, List, Optional
from status_menu.core.watcher import StateWatcher

MCE_SIGNAL_IF = "com.nokia.mce.signal"
MCE_DISPLAY_SIG = "display_status_ind"

DISPLAY_MODES = {
    "on": True,
    "dim": True,
    "off": False,
}

_display_ref: Optional["weakref.ReferenceType[DisplayWatcher]"] = None


class DisplayWatcher(StateWatcher):
    """Follows the display mode broadcast by the mode control entity (MCE)."""

    ON_SIGNAL = "display-on"
    OFF_SIGNAL = "display-off"

    def __init__(self, logger):
        super().__init__(logger, initial_state=True)
        self.bus: Any = None

    def is_on(self) -> bool:
        return self._state

    def handle_display_mode(self, value: Any) -> None:
        """
        Maps a display mode string to the on/off state. "dim" still counts as
        on. Unknown strings are logged and do not change the state.
        """
        if not isinstance(value, str):
            return
        if value not in DISPLAY_MODES:
            self.logger.warning(
                f"Unknown value {value} for signal {MCE_SIGNAL_IF}.{MCE_DISPLAY_SIG}"
            )
            return
        self._set_state(DISPLAY_MODES[value])

    def _on_display_signal(self, body: List[Any]) -> None:
        if not body:
            return
        self.handle_display_mode(body[0])

    def start(self, bus) -> None:
        """
        Subscribes to display signals on `bus` (a SignalBus or anything with
        the same `subscribe` method).
        """
        if bus is None:
            self.logger.warning("No system bus. Display state tracking is disabled.")
            return
        self.bus = bus
        bus.subscribe(MCE_SIGNAL_IF, MCE_DISPLAY_SIG, self._on_display_signal)

    def stop(self) -> None:
        if self.bus is not None:
            self.bus.unsubscribe(MCE_SIGNAL_IF, MCE_DISPLAY_SIG, self._on_display_signal)
            self.bus = None


def get_display(logger, bus=None) -> DisplayWatcher:
    """Returns the process-wide display watcher, creating it when needed."""
    global _display_ref
    display = _display_ref() if _display_ref is not None else None
    if display is None:
        display = DisplayWatcher(logger)
        display.start(bus)
        _display_ref = weakref.ref(display)
    return display
