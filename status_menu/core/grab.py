from typing import Protocol


class GrabBackend(Protocol):
    def grab_pointer(self) -> bool: ...

    def grab_keyboard(self) -> bool: ...

    def ungrab_pointer(self) -> None: ...

    def ungrab_keyboard(self) -> None: ...


class GrabTransfer:
    """
    Exclusive pointer and keyboard grab for a popup.
    The pointer is grabbed first; if the keyboard grab then fails the pointer
    grab is released again and the popup continues without a grab.
    """

    def __init__(self, backend: GrabBackend, logger):
        self.backend = backend
        self.logger = logger
        self.has_grab = False

    def acquire(self) -> bool:
        if self.has_grab:
            return True
        if not self.backend.grab_pointer():
            self.logger.warning("Pointer grab failed. Showing popup without grab.")
            return False
        if not self.backend.grab_keyboard():
            self.logger.warning("Keyboard grab failed. Releasing pointer grab.")
            self.backend.ungrab_pointer()
            return False
        self.has_grab = True
        return True

    def release(self) -> None:
        if not self.has_grab:
            return
        self.backend.ungrab_keyboard()
        self.backend.ungrab_pointer()
        self.has_grab = False
