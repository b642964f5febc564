import os
import tempfile
from pathlib import Path

APP_NAME = "status-menu"


class PathHandler:
    """
    Resolves the application's directories following the XDG Base Directory
    Specification.
    """

    def __init__(self, logger, app_name: str = APP_NAME):
        self.app_name = app_name
        self._home = Path.home()
        self.logger = logger

    def _get_xdg_base_dir(self, env_var: str, default_path: Path) -> Path:
        """Helper to get XDG base directory with fallback."""
        path_str = os.getenv(env_var)
        if path_str:
            return Path(path_str)
        return default_path

    def get_config_dir(self) -> Path:
        """
        Returns $XDG_CONFIG_HOME/status-menu, creating it if it does not exist.
        """
        config_home = self._get_xdg_base_dir("XDG_CONFIG_HOME", self._home / ".config")
        config_dir = config_home / self.app_name
        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir

    def get_data_path(self, *path_parts) -> Path:
        data_home = self._get_xdg_base_dir(
            "XDG_DATA_HOME", self._home / ".local" / "share"
        )
        path = data_home / self.app_name / Path(*path_parts)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def get_runtime_path(self, *path_parts) -> Path:
        """
        Returns a path inside $XDG_RUNTIME_DIR/status-menu, or inside the
        temporary directory when no runtime directory is set.
        """
        runtime_home = self._get_xdg_base_dir(
            "XDG_RUNTIME_DIR", Path(tempfile.gettempdir())
        )
        path = runtime_home / self.app_name / Path(*path_parts)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
