import pytest
from status_menu.core.watcher import StateWatcher


class Lamp(StateWatcher):
    ON_SIGNAL = "lamp-on"
    OFF_SIGNAL = "lamp-off"


def test_emits_only_on_transitions(logger):
    lamp = Lamp(logger)
    events = []
    lamp.connect("lamp-on", lambda w: events.append("on"))
    lamp.connect("lamp-off", lambda w: events.append("off"))
    assert lamp._set_state(False) is False
    assert lamp._set_state(True) is True
    assert lamp._set_state(True) is False
    assert lamp._set_state(False) is True
    assert events == ["on", "off"]


def test_callback_receives_watcher_and_args(logger):
    lamp = Lamp(logger)
    received = []
    lamp.connect("lamp-on", lambda w, a, b: received.append((w, a, b)), 1, "x")
    lamp._set_state(True)
    assert received == [(lamp, 1, "x")]


def test_disconnect(logger):
    lamp = Lamp(logger)
    events = []
    handler_id = lamp.connect("lamp-on", lambda w: events.append("on"))
    lamp.disconnect(handler_id)
    lamp._set_state(True)
    assert events == []


def test_unknown_signal(logger):
    with pytest.raises(ValueError):
        Lamp(logger).connect("lamp-blink", lambda w: None)


def test_failing_callback_is_logged(logger):
    lamp = Lamp(logger)
    events = []

    def broken(_watcher):
        raise RuntimeError("boom")

    lamp.connect("lamp-on", broken)
    lamp.connect("lamp-on", lambda w: events.append("on"))
    lamp._set_state(True)
    assert events == ["on"]
    logger.error.assert_called_once()
