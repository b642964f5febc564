import copy
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import toml
from status_menu.core.priority_list import POSITION_LAST, validate_position
from status_menu.shared import config_template
from status_menu.shared.path_handler import PathHandler

CONFIG_FILE_NAME = "config.toml"

STATUS_AREA_POSITION_KEY = "status-area-position"
STATUS_MENU_POSITION_KEY = "status-menu-position"
PERMANENT_ITEM_KEY = "permanent-item"
PERMANENT_ITEMS = ("Clock", "Signal", "Battery")


class ConfigHandler:
    """
    Manages the application's configuration file (config.toml).
    Handles file I/O, merging with the defaults of config_template, file
    change monitoring (via GIO) and notification of reload listeners.
    """

    def __init__(self, logger, config_dir: Optional[Path] = None):
        """
        Loads the initial configuration.
        Args:
            logger: The application logger.
            config_dir: Directory holding config.toml. Defaults to
                        $XDG_CONFIG_HOME/status-menu.
        """
        self.logger = logger
        if config_dir is None:
            config_dir = PathHandler(logger).get_config_dir()
        self.config_dir = Path(config_dir)
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self.default_config = copy.deepcopy(config_template.default_config)
        self.config_monitor: Any = None
        self._last_mod_time: float = 0.0
        self._load_successful: bool = False
        self._reload_listeners: List[Callable[[Dict[str, Any]], None]] = []
        self._item_defaults: Dict[str, Dict[str, Any]] = {}
        self.config_data: Dict[str, Any] = self.load_config()

    def _strip_hints(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Recursively removes keys ending with '_hint' from a configuration
        dictionary destined for TOML.
        """
        stripped_data = {}
        for key, value in data.items():
            if key.endswith("_hint"):
                continue
            if isinstance(value, dict):
                stripped_data[key] = self._strip_hints(value)
            else:
                stripped_data[key] = value
        return stripped_data

    @property
    def default_config_stripped(self) -> Dict[str, Any]:
        return self._strip_hints(self.default_config)

    def _recursive_merge(
        self, user_config: Dict[str, Any], default_config: Dict[str, Any]
    ) -> bool:
        """
        Merges missing keys from `default_config` into `user_config`.
        Returns:
            True if any key was added.
        """
        added = False
        for key, default_value in default_config.items():
            if key not in user_config:
                user_config[key] = copy.deepcopy(default_value)
                added = True
            elif isinstance(default_value, dict) and isinstance(
                user_config.get(key), dict
            ):
                if self._recursive_merge(user_config[key], default_value):
                    added = True
        return added

    def load_config(self) -> Dict[str, Any]:
        """
        Loads the configuration from file, or the defaults if it is missing or
        corrupt. A missing file is created from the defaults; a corrupt one is
        left untouched.
        """
        config_from_file: Dict[str, Any] = {}
        file_must_be_created = not self.config_file.exists()
        if file_must_be_created:
            self.logger.info("Config file is missing. Will apply defaults and create.")
            self._load_successful = True
        else:
            try:
                with open(self.config_file, "r") as f:
                    config_from_file = toml.load(f)
                self._last_mod_time = os.path.getmtime(self.config_file)
                self._load_successful = True
                self.logger.debug("Existing config.toml loaded successfully.")
            except (toml.TomlDecodeError, OSError) as e:
                self.logger.error(
                    f"Failed to load {self.config_file}: {e}. Using default configuration."
                )
                self._load_successful = False
                config_from_file = {}
        self._recursive_merge(config_from_file, self.default_config_stripped)
        if file_must_be_created:
            self.save_config(config_from_file)
        return config_from_file

    def save_config(self, data: Optional[Dict[str, Any]] = None) -> None:
        """Writes `data` (default: self.config_data) to the TOML file."""
        if not self._load_successful:
            self.logger.warning(
                "Skipping configuration save: config.toml failed to load. Please fix it manually."
            )
            return
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                toml.dump(self.config_data if data is None else data, f)
            self._last_mod_time = os.path.getmtime(self.config_file)
            self.logger.info("Configuration saved successfully.")
        except OSError as e:
            self.logger.error(f"Failed to save configuration to file: {e}")

    def reload_config(self) -> None:
        """Re-reads the file and notifies the reload listeners."""
        new_config = self.load_config()
        if not self._load_successful:
            self.logger.error(
                f"Keeping the current configuration: {self.config_file} could not be parsed."
            )
            return
        self.config_data.clear()
        self.config_data.update(new_config)
        self.logger.info("Configuration reloaded from file.")
        for listener in list(self._reload_listeners):
            try:
                listener(self.config_data)
            except Exception as e:
                self.logger.error(f"Error in configuration reload listener: {e}")

    def add_reload_listener(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        self._reload_listeners.append(callback)

    def start_watcher(self) -> None:
        """Starts the GIO file monitor for real-time config updates."""
        from gi.repository import Gio  # pyright: ignore

        try:
            gio_file = Gio.File.new_for_path(str(self.config_file))
            self.config_monitor = gio_file.monitor_file(Gio.FileMonitorFlags.NONE, None)
            self.config_monitor.connect("changed", self._on_config_file_changed)
        except Exception as e:
            self.logger.error(f"Failed to start Gio.FileMonitor: {e}")

    def stop_watcher(self) -> None:
        if self.config_monitor is not None:
            self.config_monitor.cancel()
            self.config_monitor = None

    def _on_config_file_changed(self, monitor, file, other_file, event_type) -> None:
        """
        Reloads when config.toml was modified after our last load or save.
        """
        from gi.repository import Gio  # pyright: ignore

        if event_type not in (
            Gio.FileMonitorEvent.CHANGES_DONE_HINT,
            Gio.FileMonitorEvent.CREATED,
        ):
            return
        try:
            current_mod_time = os.path.getmtime(self.config_file)
        except FileNotFoundError:
            self.logger.warning("Config file not found during change check.")
            return
        if current_mod_time > self._last_mod_time:
            self.reload_config()
        else:
            self.logger.debug("Change event ignored, config file is unchanged.")

    def get_root_setting(self, key_path: List[str], default_value: Any = None) -> Any:
        """
        Traverses the configuration to retrieve a value.
        Args:
            key_path: Path of keys, e.g. ['status_area', 'layer'].
            default_value: Value returned if the path is not found.
        """
        current_data: Any = self.config_data
        for i, key in enumerate(key_path):
            if isinstance(current_data, dict) and key in current_data:
                current_data = current_data[key]
            else:
                self.logger.debug(
                    f"Missing configuration key at path: {' -> '.join(key_path[: i + 1])}. Using default value: {default_value}"
                )
                return default_value
        return current_data

    def set_root_setting(self, key_path: List[str], new_value: Any) -> bool:
        """Sets a configuration value, creating sections as needed, and saves."""
        if not key_path:
            self.logger.error("Configuration key path cannot be empty.")
            return False
        if not self._load_successful:
            self.logger.warning(
                f"Update to key {' -> '.join(key_path)} skipped: config.toml failed to load."
            )
            return False
        current_data = self.config_data
        for key in key_path[:-1]:
            if not isinstance(current_data.get(key), dict):
                current_data[key] = {}
            current_data = current_data[key]
        current_data[key_path[-1]] = new_value
        self.logger.info(f"Set config key {' -> '.join(key_path)} to {new_value}.")
        self.save_config()
        return True

    def get_items(self) -> Dict[str, Dict[str, Any]]:
        """Returns the per-plugin item tables, keyed by plugin id."""
        items = self.get_root_setting(["items"], {})
        if not isinstance(items, dict):
            self.logger.warning("The 'items' configuration is not a table. Ignoring it.")
            return {}
        return {
            plugin_id: table
            for plugin_id, table in items.items()
            if isinstance(table, dict)
        }

    def set_item_defaults(self, plugin_id: str, defaults: Dict[str, Any]) -> None:
        """
        Registers fallback values for an item, usually taken from the plugin
        metadata. Values in config.toml take precedence.
        """
        self._item_defaults[plugin_id] = dict(defaults)

    def get_item_setting(self, plugin_id: str, key: str, default: Any = None) -> Any:
        table = self.get_items().get(plugin_id, {})
        if key in table:
            return table[key]
        return self._item_defaults.get(plugin_id, {}).get(key, default)

    def get_item_position(self, plugin_id: str, key: str) -> int:
        """
        Reads a position key of an item. Missing or malformed values fall back
        to POSITION_LAST.
        """
        value = self.get_item_setting(plugin_id, key, None)
        if value is None:
            return POSITION_LAST
        try:
            return validate_position(value)
        except ValueError:
            self.logger.warning(
                f"Invalid {key} value {value!r} for item '{plugin_id}'. Placing it last."
            )
            return POSITION_LAST

    def get_permanent_item(self, plugin_id: str) -> Optional[str]:
        """Returns the permanent slot name of an item, or None."""
        value = self.get_item_setting(plugin_id, PERMANENT_ITEM_KEY, None)
        if value is None or value == "":
            return None
        if value not in PERMANENT_ITEMS:
            self.logger.warning(
                f"Unknown {PERMANENT_ITEM_KEY} '{value}' for item '{plugin_id}'. Ignoring it."
            )
            return None
        return value
