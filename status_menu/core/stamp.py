from pathlib import Path
from typing import Union

STAMP_FILE_NAME = "status-menu.stamp"


class StampFile:
    """
    Marker file that exists while plugins are being loaded.
    A stamp left over from a previous run tells an external watchdog (and the
    log) that the last start did not finish cleanly.
    """

    def __init__(self, path: Union[str, Path], logger):
        self.path = Path(path)
        self.logger = logger

    def exists(self) -> bool:
        return self.path.exists()

    def create(self) -> None:
        if self.exists():
            self.logger.warning(
                f"Stamp file {self.path} already exists. The previous run did not exit cleanly."
            )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch()
        except OSError as e:
            self.logger.warning(f"Could not create stamp file {self.path}: {e}")

    def remove(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            self.logger.warning(f"Could not remove stamp file {self.path}: {e}")
