from status_menu.core.display import (
    MCE_DISPLAY_SIG,
    MCE_SIGNAL_IF,
    DisplayWatcher,
    get_display,
)


class FakeBus:
    def __init__(self):
        self.callbacks = {}

    def subscribe(self, interface, member, callback):
        self.callbacks.setdefault((interface, member), []).append(callback)

    def unsubscribe(self, interface, member, callback):
        self.callbacks[(interface, member)].remove(callback)

    def send(self, interface, member, body):
        for callback in list(self.callbacks.get((interface, member), [])):
            callback(body)


def record(watcher):
    events = []
    watcher.connect("display-on", lambda w: events.append("on"))
    watcher.connect("display-off", lambda w: events.append("off"))
    return events


def test_starts_on(logger):
    assert DisplayWatcher(logger).is_on() is True


def test_display_modes(logger):
    watcher = DisplayWatcher(logger)
    events = record(watcher)
    watcher.handle_display_mode("off")
    assert watcher.is_on() is False
    watcher.handle_display_mode("dim")
    assert watcher.is_on() is True
    watcher.handle_display_mode("on")
    assert events == ["off", "on"]


def test_unknown_mode_is_logged_and_ignored(logger):
    watcher = DisplayWatcher(logger)
    events = record(watcher)
    watcher.handle_display_mode("sleepy")
    assert watcher.is_on() is True
    assert events == []
    logger.warning.assert_called_once()


def test_non_string_mode_is_ignored(logger):
    watcher = DisplayWatcher(logger)
    watcher.handle_display_mode(0)
    watcher.handle_display_mode(None)
    assert watcher.is_on() is True
    logger.warning.assert_not_called()


def test_bus_signal_drives_state(logger):
    bus = FakeBus()
    watcher = DisplayWatcher(logger)
    events = record(watcher)
    watcher.start(bus)
    bus.send(MCE_SIGNAL_IF, MCE_DISPLAY_SIG, ["off"])
    bus.send(MCE_SIGNAL_IF, MCE_DISPLAY_SIG, [])
    bus.send(MCE_SIGNAL_IF, MCE_DISPLAY_SIG, ["on"])
    assert events == ["off", "on"]
    watcher.stop()
    bus.send(MCE_SIGNAL_IF, MCE_DISPLAY_SIG, ["off"])
    assert watcher.is_on() is True


def test_start_without_bus(logger):
    watcher = DisplayWatcher(logger)
    watcher.start(None)
    logger.warning.assert_called_once()
    assert watcher.bus is None


def test_get_display_shares_instance(logger):
    bus = FakeBus()
    first = get_display(logger, bus)
    second = get_display(logger, bus)
    assert first is second
