from status_menu.core.grab import GrabTransfer


class FakeBackend:
    def __init__(self, pointer=True, keyboard=True):
        self.pointer = pointer
        self.keyboard = keyboard
        self.calls = []

    def grab_pointer(self):
        self.calls.append("grab_pointer")
        return self.pointer

    def grab_keyboard(self):
        self.calls.append("grab_keyboard")
        return self.keyboard

    def ungrab_pointer(self):
        self.calls.append("ungrab_pointer")

    def ungrab_keyboard(self):
        self.calls.append("ungrab_keyboard")


def test_acquire_grabs_pointer_then_keyboard(logger):
    backend = FakeBackend()
    grab = GrabTransfer(backend, logger)
    assert grab.acquire() is True
    assert grab.has_grab is True
    assert backend.calls == ["grab_pointer", "grab_keyboard"]


def test_acquire_twice_is_noop(logger):
    backend = FakeBackend()
    grab = GrabTransfer(backend, logger)
    grab.acquire()
    assert grab.acquire() is True
    assert backend.calls == ["grab_pointer", "grab_keyboard"]


def test_pointer_failure(logger):
    backend = FakeBackend(pointer=False)
    grab = GrabTransfer(backend, logger)
    assert grab.acquire() is False
    assert grab.has_grab is False
    assert backend.calls == ["grab_pointer"]
    logger.warning.assert_called_once()


def test_keyboard_failure_releases_pointer(logger):
    backend = FakeBackend(keyboard=False)
    grab = GrabTransfer(backend, logger)
    assert grab.acquire() is False
    assert grab.has_grab is False
    assert backend.calls == ["grab_pointer", "grab_keyboard", "ungrab_pointer"]


def test_release(logger):
    backend = FakeBackend()
    grab = GrabTransfer(backend, logger)
    grab.acquire()
    grab.release()
    assert grab.has_grab is False
    assert backend.calls[-2:] == ["ungrab_keyboard", "ungrab_pointer"]


def test_release_without_grab(logger):
    backend = FakeBackend()
    GrabTransfer(backend, logger).release()
    assert backend.calls == []
