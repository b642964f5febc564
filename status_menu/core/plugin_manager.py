import os
import sys
import importlib
from typing import Any, Dict, List, Optional
from gi.repository import GLib, GObject  # pyright: ignore
from status_menu.core.stamp import STAMP_FILE_NAME, StampFile
from status_menu.shared.config_handler import (
    PERMANENT_ITEM_KEY,
    STATUS_AREA_POSITION_KEY,
    STATUS_MENU_POSITION_KEY,
)

ITEM_DEFAULT_KEYS = (
    STATUS_AREA_POSITION_KEY,
    STATUS_MENU_POSITION_KEY,
    PERMANENT_ITEM_KEY,
)


class PluginManager(GObject.Object):
    """
    Loads the status plugins listed in the `[items]` section of config.toml
    and announces them to the status area and the status menu.

    Every item table names the Python module of the plugin. A plugin module
    exposes `get_plugin_metadata(manager)` returning a dict (defaults for the
    item keys live here) and `get_plugin_class()` returning a StatusMenuItem
    subclass, which is instantiated as `cls(shell, plugin_id)`.

    Loading happens in an idle callback after `run()`. A crash stamp exists
    for the duration of the load so that a start that never finished can be
    detected on the next run.
    """

    __gtype_name__ = "StatusMenuPluginManager"
    __gsignals__ = {
        "plugin-added": (GObject.SignalFlags.RUN_FIRST, None, (GObject.Object,)),
        "plugin-removed": (GObject.SignalFlags.RUN_FIRST, None, (GObject.Object,)),
        "configuration-loaded": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "items-configuration-loaded": (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    def __init__(self, shell):
        super().__init__()
        self.shell = shell
        self.logger = shell.logger
        self.config_handler = shell.config_handler
        self.items: Dict[str, Any] = {}
        self.modules: Dict[str, str] = {}
        self.stamp = StampFile(
            shell.path_handler.get_runtime_path(STAMP_FILE_NAME), self.logger
        )
        self.loaded = False
        self._load_source_id: Optional[int] = None
        self.config_handler.add_reload_listener(self._on_config_reloaded)

    def run(self) -> None:
        """Starts loading the configured items from the main loop."""
        if self.loaded or self._load_source_id is not None:
            return
        self.stamp.create()
        self._load_source_id = GLib.idle_add(self._load_items)

    def _load_items(self) -> bool:
        self._load_source_id = None
        self._add_custom_path()
        self.emit("configuration-loaded")
        configured = self._enabled_items()
        self.logger.info(f"Loading {len(configured)} status item(s).")
        for plugin_id, table in configured.items():
            self.load_item(plugin_id, table)
        self.loaded = True
        self.emit("items-configuration-loaded")
        self.stamp.remove()
        self.logger.info(f"Status items loaded: {', '.join(self.items) or 'none'}")
        return False

    def _add_custom_path(self) -> None:
        custom_path = self.config_handler.get_root_setting(["plugins", "custom_path"])
        if not custom_path:
            return
        custom_path = os.path.expanduser(str(custom_path))
        if os.path.isdir(custom_path) and custom_path not in sys.path:
            sys.path.append(custom_path)
            self.logger.debug(f"Added custom plugin path {custom_path}")

    def _enabled_items(self) -> Dict[str, Dict[str, Any]]:
        return {
            plugin_id: table
            for plugin_id, table in self.config_handler.get_items().items()
            if table.get("enabled", True) is not False
        }

    def _forget_module(self, module_path: str) -> None:
        if module_path in sys.modules:
            del sys.modules[module_path]

    def load_item(self, plugin_id: str, table: Dict[str, Any]):
        """
        Imports and instantiates one item.
        Returns:
            The new item, or None when the plugin could not be loaded.
        """
        if plugin_id in self.items:
            return self.items[plugin_id]
        module_path = table.get("module")
        if not isinstance(module_path, str) or not module_path:
            self.logger.error(f"Item '{plugin_id}' has no 'module' setting. Skipping.")
            return None
        try:
            module = importlib.import_module(module_path)
        except Exception as e:
            self.logger.error(
                f"Failed to import module {module_path} for item '{plugin_id}': {e}",
                exc_info=True,
            )
            self._forget_module(module_path)
            return None
        if not hasattr(module, "get_plugin_metadata") or not hasattr(
            module, "get_plugin_class"
        ):
            self.logger.error(
                f"Module {module_path} is missing required functions (get_plugin_metadata or get_plugin_class). Skipping."
            )
            return None
        try:
            metadata = module.get_plugin_metadata(self)
            if not isinstance(metadata, dict):
                self.logger.error(
                    f"Plugin {module_path} get_plugin_metadata did not return a dictionary. Skipping."
                )
                return None
            self.config_handler.set_item_defaults(
                plugin_id, {k: metadata[k] for k in ITEM_DEFAULT_KEYS if k in metadata}
            )
            plugin_class = module.get_plugin_class()
            item = plugin_class(self.shell, plugin_id)
            item.on_start()
        except Exception as e:
            self.logger.error(
                f"Failed to initialize item '{plugin_id}' from {module_path}: {e}",
                exc_info=True,
            )
            return None
        self.items[plugin_id] = item
        self.modules[plugin_id] = module_path
        self.emit("plugin-added", item)
        self.logger.debug(f"Item '{plugin_id}' loaded from {module_path}")
        return item

    def unload_item(self, plugin_id: str) -> None:
        item = self.items.pop(plugin_id, None)
        self.modules.pop(plugin_id, None)
        if item is None:
            return
        try:
            item.on_stop()
        except Exception as e:
            self.logger.error(f"Error while stopping item '{plugin_id}': {e}", exc_info=True)
        self.emit("plugin-removed", item)
        self.logger.debug(f"Item '{plugin_id}' unloaded")

    def _on_config_reloaded(self, _config_data) -> None:
        if not self.loaded:
            return
        configured = self._enabled_items()
        for plugin_id in [p for p in self.items if p not in configured]:
            self.unload_item(plugin_id)
        for plugin_id, table in configured.items():
            if self.modules.get(plugin_id) not in (None, table.get("module")):
                self.unload_item(plugin_id)
            if plugin_id not in self.items:
                self.load_item(plugin_id, table)
        self.emit("items-configuration-loaded")

    def get_items(self) -> List[Any]:
        return list(self.items.values())

    def get_item(self, plugin_id: str):
        return self.items.get(plugin_id)

    def get_item_setting(self, plugin_id: str, key: str, default: Any = None) -> Any:
        return self.config_handler.get_item_setting(plugin_id, key, default)

    def get_position(self, plugin_id: str, key: str) -> int:
        return self.config_handler.get_item_position(plugin_id, key)

    def get_permanent_item(self, plugin_id: str) -> Optional[str]:
        return self.config_handler.get_permanent_item(plugin_id)

    def shutdown(self) -> None:
        if self._load_source_id is not None:
            GLib.source_remove(self._load_source_id)
            self._load_source_id = None
        for plugin_id in list(self.items):
            self.unload_item(plugin_id)
        self.stamp.remove()
