from typing import List, Optional, Tuple
import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gdk, GLib, Gtk  # pyright: ignore
from status_menu.core.grab import GrabTransfer
from status_menu.core.layout import status_menu_geometry, MenuGeometry
from status_menu.shared.config_handler import STATUS_MENU_POSITION_KEY
from status_menu.shared.layer_shell_helpers import set_margin, setup_layer_shell
from status_menu.shared.x11_helpers import (
    APP_MENU_WINDOW_TYPE,
    move_window,
    set_window_type,
)
from status_menu.ui.grab_window import GtkGrabBackend
from status_menu.ui.items import StatusMenuItem
from status_menu.ui.status_menu_box import StatusMenuBox

STATUS_MENU_NAMESPACE = "status-menu"
STATUS_MENU_LAYER = "OVERLAY"


class StatusMenu(Gtk.Window):
    """
    Modal popup listing the full-size widget of every status plugin.
    While mapped the menu holds the pointer and keyboard grab; a click outside
    of it or Escape hides it again.
    """

    __gtype_name__ = "StatusMenu"

    def __init__(self, shell, plugin_manager=None, display_watcher=None):
        super().__init__(application=shell)
        self.shell = shell
        self.logger = shell.logger
        self.plugin_manager = plugin_manager
        self.display_watcher = display_watcher
        self.geometry: Optional[MenuGeometry] = None
        self._plugin_handlers: List[int] = []
        self._monitor_handlers: List[Tuple[Gdk.Monitor, int]] = []
        self._monitors_handler: Optional[int] = None
        self._display_off_handler: Optional[int] = None
        self.set_title("Status menu")
        self.set_modal(True)
        self.set_decorated(False)
        self.set_resizable(False)
        self.set_hide_on_close(True)
        self.add_css_class("status-menu")
        self._layered = setup_layer_shell(
            self, STATUS_MENU_NAMESPACE, layer=STATUS_MENU_LAYER, anchors=("TOP",)
        )
        self.box = StatusMenuBox()
        self.pane = Gtk.ScrolledWindow()
        self.pane.set_policy(Gtk.PolicyType.NEVER, Gtk.PolicyType.AUTOMATIC)
        self.pane.set_propagate_natural_height(False)
        self.pane.set_child(self.box)
        self.set_child(self.pane)
        self.grab = GrabTransfer(GtkGrabBackend(self, self.hide_menu), self.logger)
        key_controller = Gtk.EventControllerKey()
        key_controller.connect("key-pressed", self._on_key_pressed)
        self.add_controller(key_controller)
        self.connect("realize", self._on_realize)
        self.connect("map", self._on_map)
        self.connect("unmap", self._on_unmap)
        self._connect_plugin_manager()
        self._connect_display_watcher()
        self._watch_screen()
        self.update_geometry()

    def _connect_plugin_manager(self) -> None:
        if self.plugin_manager is None:
            self.logger.warning(
                "Status menu created without a plugin manager. No plugins will be shown."
            )
            return
        pm = self.plugin_manager
        self._plugin_handlers = [
            pm.connect("plugin-added", self._on_plugin_added),
            pm.connect("plugin-removed", self._on_plugin_removed),
            pm.connect("items-configuration-loaded", self._on_items_configuration_loaded),
        ]
        for item in pm.get_items():
            self._on_plugin_added(pm, item)

    def _connect_display_watcher(self) -> None:
        if self.display_watcher is None:
            return
        self._display_off_handler = self.display_watcher.connect(
            "display-off", self._on_display_off
        )

    def _watch_screen(self) -> None:
        display = Gdk.Display.get_default()
        if display is None:
            return
        monitors = display.get_monitors()
        self._monitors_handler = monitors.connect("items-changed", self._on_monitors_changed)
        self._connect_monitors(monitors)

    def _connect_monitors(self, monitors) -> None:
        for monitor, handler_id in self._monitor_handlers:
            monitor.disconnect(handler_id)
        self._monitor_handlers = []
        for index in range(monitors.get_n_items()):
            monitor = monitors.get_item(index)
            handler_id = monitor.connect("notify::geometry", self._on_monitor_geometry)
            self._monitor_handlers.append((monitor, handler_id))

    def _primary_monitor_geometry(self) -> Optional[Gdk.Rectangle]:
        display = Gdk.Display.get_default()
        if display is None:
            return None
        monitors = display.get_monitors()
        if monitors.get_n_items() == 0:
            return None
        return monitors.get_item(0).get_geometry()

    def update_geometry(self) -> None:
        """
        Fits the pane to the current screen: column count, pane size and
        padding follow the orientation and the window is centred.
        """
        screen = self._primary_monitor_geometry()
        if screen is None:
            return
        columns = status_menu_geometry(screen.width, screen.height, 0).columns
        geometry = status_menu_geometry(
            screen.width, screen.height, self.box.natural_height(columns)
        )
        self.geometry = geometry
        self.box.props.columns = geometry.columns
        self.pane.set_size_request(geometry.pane_width, geometry.pane_height)
        for setter in (
            self.pane.set_margin_top,
            self.pane.set_margin_bottom,
            self.pane.set_margin_start,
            self.pane.set_margin_end,
        ):
            setter(geometry.padding)
        self.set_default_size(geometry.width, geometry.height)
        if self._layered:
            set_margin(self, "TOP", geometry.y)
        elif self.get_realized():
            move_window(self, geometry.x, geometry.y, self.logger)
        self.logger.debug(
            f"Status menu geometry: {geometry.columns} column(s), pane {geometry.pane_width}x{geometry.pane_height} at {geometry.x},{geometry.y}"
        )

    def show_menu(self) -> None:
        self.update_geometry()
        self.present()

    def hide_menu(self) -> None:
        if self.get_visible():
            self.set_visible(False)

    def _on_realize(self, *_):
        set_window_type(self, APP_MENU_WINDOW_TYPE, self.logger)
        if self.geometry is not None and not self._layered:
            move_window(self, self.geometry.x, self.geometry.y, self.logger)

    def _on_map(self, *_):
        self.grab.acquire()
        for item in self._items():
            item.emit("status-menu-map")

    def _on_unmap(self, *_):
        self.grab.release()
        for item in self._items():
            item.emit("status-menu-unmap")

    def _on_key_pressed(self, controller, keyval, keycode, state):
        if keyval == Gdk.KEY_Escape:
            self.hide_menu()
            return True
        return False

    def _on_display_off(self, *_):
        hide = True
        if self.shell.config_handler is not None:
            hide = self.shell.config_handler.get_root_setting(
                ["status_menu", "hide_on_display_off"], True
            )
        if hide:
            self.hide_menu()

    def _on_monitors_changed(self, monitors, position, removed, added):
        self._connect_monitors(monitors)
        self.update_geometry()

    def _on_monitor_geometry(self, monitor, _pspec):
        self.update_geometry()

    def _items(self) -> List[StatusMenuItem]:
        return [
            child for child in self.box.get_children() if isinstance(child, StatusMenuItem)
        ]

    def _on_plugin_added(self, plugin_manager, item):
        if not isinstance(item, StatusMenuItem):
            return
        if item.get_parent() is self.box:
            return
        position = plugin_manager.get_position(item.props.plugin_id, STATUS_MENU_POSITION_KEY)
        self.box.pack(item, position)
        if self.get_mapped():
            item.emit("status-menu-map")
        GLib.idle_add(self._update_geometry_once)

    def _on_plugin_removed(self, plugin_manager, item):
        if item.get_parent() is not self.box:
            return
        if self.get_mapped():
            item.emit("status-menu-unmap")
        self.box.remove(item)
        GLib.idle_add(self._update_geometry_once)

    def _on_items_configuration_loaded(self, plugin_manager):
        for item in self._items():
            position = plugin_manager.get_position(
                item.props.plugin_id, STATUS_MENU_POSITION_KEY
            )
            self.box.reorder_child(item, position)

    def _update_geometry_once(self) -> bool:
        self.update_geometry()
        return False

    def disconnect_all(self) -> None:
        for handler_id in self._plugin_handlers:
            self.plugin_manager.disconnect(handler_id)  # pyright: ignore
        self._plugin_handlers = []
        if self._display_off_handler is not None:
            self.display_watcher.disconnect(self._display_off_handler)  # pyright: ignore
            self._display_off_handler = None
        for monitor, handler_id in self._monitor_handlers:
            monitor.disconnect(handler_id)
        self._monitor_handlers = []
        display = Gdk.Display.get_default()
        if display is not None and self._monitors_handler is not None:
            display.get_monitors().disconnect(self._monitors_handler)
            self._monitors_handler = None
        self.grab.release()
        self.grab.backend.destroy()  # pyright: ignore
