#!/usr/bin/env python3
import logging
import sys
import threading
from status_menu.core._event_loop import start_global_loop, stop_global_loop
from status_menu.core.log_setup import LOGGER_NAME, setup_logging


def global_exception_handler(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger = logging.getLogger(LOGGER_NAME)
    logger.error(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback),
        extra={"thread_name": threading.current_thread().name},
    )


def main() -> int:
    logger = setup_logging(level=logging.INFO)
    sys.excepthook = global_exception_handler
    start_global_loop()
    from status_menu.shell import StatusShell

    app = StatusShell(logger)
    try:
        return app.run(sys.argv)
    finally:
        stop_global_loop()


if __name__ == "__main__":
    sys.exit(main())
