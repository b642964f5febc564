import asyncio
from concurrent.futures import Future
from typing import Any, Awaitable, Callable, Optional, Set
from gi.repository import GLib  # pyright: ignore
from status_menu.core._event_loop import get_global_loop


class ConcurrencyHelper:
    """
    Bridges the background asyncio loop and the GTK main loop for one owner
    (a bus client, a watcher) and keeps track of what it scheduled so it can
    be cancelled on shutdown.
    """

    def __init__(self, owner: Any):
        self._owner = owner
        self.global_loop = get_global_loop()
        self._running_futures: Set[Future] = set()

    @property
    def logger(self):
        return self._owner.logger

    def schedule_in_gtk_thread(self, func: Callable, *args, **kwargs) -> None:
        """
        Runs `func` once from the GLib main loop. Every state change that
        originates on the asyncio thread goes through here.
        """

        def wrapper():
            try:
                func(*args, **kwargs)
            except Exception as e:
                self.logger.error(
                    f"Error executing {getattr(func, '__name__', func)} in GTK thread: {e}",
                    exc_info=True,
                )
            return GLib.SOURCE_REMOVE

        GLib.idle_add(wrapper)

    def run_in_async_task(
        self,
        coro: Awaitable[Any],
        on_finish: Optional[Callable[[Any], None]] = None,
    ) -> Future:
        """
        Submits a coroutine to the background loop. `on_finish` receives the
        result in the GTK thread; failures are logged.
        """
        future = asyncio.run_coroutine_threadsafe(coro, self.global_loop)  # pyright: ignore
        self._running_futures.add(future)
        coro_name = getattr(coro, "__qualname__", repr(coro).split(" object")[0])

        def done_callback(done: Future):
            self._running_futures.discard(done)
            if done.cancelled():
                self.logger.debug(f"Async coroutine {coro_name} cancelled.")
                return
            exception = done.exception()
            if exception:
                self.logger.error(
                    f"Async coroutine {coro_name} failed: {exception}",
                    exc_info=exception,
                )
            elif on_finish:
                self.schedule_in_gtk_thread(on_finish, done.result())

        future.add_done_callback(done_callback)
        return future

    def cleanup(self) -> None:
        for future in list(self._running_futures):
            if not future.done():
                future.cancel()
        self._running_futures.clear()
