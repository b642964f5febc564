import asyncio
import threading
from typing import Optional

_GLOBAL_LOOP: Optional[asyncio.AbstractEventLoop] = None
_LOOP_THREAD: Optional[threading.Thread] = None


def get_global_loop() -> asyncio.AbstractEventLoop:
    """
    Returns the global asyncio event loop instance.

    If the loop has not been initialized, it creates a new one. This approach
    bypasses the deprecated asyncio policy system by maintaining a local
    singleton reference.

    Returns:
        asyncio.AbstractEventLoop: The active global event loop.
    """
    global _GLOBAL_LOOP
    if _GLOBAL_LOOP is None:
        _GLOBAL_LOOP = asyncio.new_event_loop()
    return _GLOBAL_LOOP


def start_global_loop() -> asyncio.AbstractEventLoop:
    """
    Runs the global loop forever in a daemon thread so D-Bus clients can live
    next to the GTK main loop. Calling it again is a no-op.
    """
    global _LOOP_THREAD
    loop = get_global_loop()
    if _LOOP_THREAD is not None and _LOOP_THREAD.is_alive():
        return loop

    def _run():
        asyncio.set_event_loop(loop)
        loop.run_forever()

    _LOOP_THREAD = threading.Thread(
        target=_run, name="StatusMenuAsyncLoop", daemon=True
    )
    _LOOP_THREAD.start()
    return loop


def stop_global_loop() -> None:
    global _LOOP_THREAD
    loop = get_global_loop()
    if loop.is_running():
        loop.call_soon_threadsafe(loop.stop)
    if _LOOP_THREAD is not None:
        _LOOP_THREAD.join(timeout=1.0)
        _LOOP_THREAD = None
