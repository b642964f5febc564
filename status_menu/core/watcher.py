from typing import Any, Callable, ClassVar, Dict, List, Tuple


class StateWatcher:
    """
    Base class for objects that follow one boolean piece of desktop state and
    notify listeners when it flips.
    Subclasses name their two notifications in ON_SIGNAL and OFF_SIGNAL and
    feed decoded values to `_set_state`.
    """

    ON_SIGNAL: ClassVar[str] = ""
    OFF_SIGNAL: ClassVar[str] = ""

    def __init__(self, logger, initial_state: bool = False):
        self.logger = logger
        self._state = initial_state
        self._next_handler_id = 1
        self._handlers: Dict[int, Tuple[str, Callable[..., Any], tuple]] = {}

    @property
    def signals(self) -> List[str]:
        return [self.ON_SIGNAL, self.OFF_SIGNAL]

    def connect(self, signal_name: str, callback: Callable[..., Any], *args) -> int:
        """
        Registers a callback for one of the watcher's notifications.
        The callback receives the watcher followed by the extra args.
        Returns:
            A handler id usable with `disconnect`.
        """
        if signal_name not in self.signals:
            raise ValueError(f"Unknown signal '{signal_name}' for {type(self).__name__}")
        handler_id = self._next_handler_id
        self._next_handler_id += 1
        self._handlers[handler_id] = (signal_name, callback, args)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        self._handlers.pop(handler_id, None)

    def emit(self, signal_name: str) -> None:
        for name, callback, args in list(self._handlers.values()):
            if name != signal_name:
                continue
            try:
                callback(self, *args)
            except Exception as e:
                self.logger.error(
                    f"Error in '{signal_name}' callback {getattr(callback, '__name__', callback)}: {e}",
                    exc_info=True,
                )

    def _set_state(self, value: bool) -> bool:
        """
        Stores a newly decoded state and emits only on a transition.
        Returns:
            True if the state changed.
        """
        value = bool(value)
        if value == self._state:
            return False
        self._state = value
        self.emit(self.ON_SIGNAL if value else self.OFF_SIGNAL)
        return True
