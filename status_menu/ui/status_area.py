from dataclasses import dataclass, field
from typing import Dict, List, Optional
import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gtk  # pyright: ignore
from status_menu.core.layout import (
    MINIMUM_STATUS_AREA_WIDTH,
    STATUS_AREA_HEIGHT,
    STATUS_AREA_ITEM_HEIGHT,
)
from status_menu.shared.config_handler import STATUS_AREA_POSITION_KEY
from status_menu.shared.layer_shell_helpers import setup_layer_shell
from status_menu.shared.x11_helpers import STATUS_AREA_WINDOW_TYPE, set_window_type
from status_menu.ui.items import StatusPluginItem
from status_menu.ui.status_area_box import StatusAreaBox

STATUS_AREA_NAMESPACE = "status-area"


@dataclass
class _AreaEntry:
    """What the status area shows for one plugin item."""

    slot: Optional[str]
    image: Optional[Gtk.Image] = None
    widget: Optional[Gtk.Widget] = None
    handlers: List[int] = field(default_factory=list)


def _new_icon_image() -> Gtk.Image:
    image = Gtk.Image()
    image.set_pixel_size(STATUS_AREA_ITEM_HEIGHT)
    image.add_css_class("status-area-icon")
    return image


def _set_image_icon(image: Gtk.Image, icon_name: str) -> None:
    if icon_name:
        image.set_from_icon_name(icon_name)
        image.set_visible(True)
    else:
        image.clear()
        image.set_visible(False)


def claim_permanent_slot(
    slot: Optional[str], plugin_id: str, taken, logger
) -> Optional[str]:
    """
    Returns the permanent slot an item may use. A slot already owned by
    another item is refused and the item goes to the icon grid instead.
    """
    if slot is not None and slot in taken:
        logger.warning(
            f"Permanent slot {slot} is already used. Showing '{plugin_id}' in the icon grid."
        )
        return None
    return slot


class StatusArea(Gtk.Window):
    """
    The always visible strip in the top left corner.

    Holds three permanent slots (clock, signal and battery) and a grid of
    icons for the other plugins. Clicking anywhere on it opens the status
    menu. The area hides itself while the task switcher is shown.
    """

    __gtype_name__ = "StatusArea"

    def __init__(self, shell, plugin_manager=None, desktop_watcher=None):
        super().__init__(application=shell)
        self.shell = shell
        self.logger = shell.logger
        self.plugin_manager = plugin_manager
        self.desktop_watcher = desktop_watcher
        self.status_area_visible = True
        self._entries: Dict[StatusPluginItem, _AreaEntry] = {}
        self._plugin_handlers: List[int] = []
        self._desktop_handlers: List[int] = []
        self.set_title("Status area")
        self.set_decorated(False)
        self.set_resizable(False)
        self.set_focus_on_click(False)
        self.add_css_class("status-area")
        self._setup_surface()
        self._build_layout()
        click = Gtk.GestureClick()
        click.set_button(0)
        click.connect("released", self._on_released)
        self.add_controller(click)
        self.connect("realize", self._on_realize)
        self._connect_plugin_manager()
        self._connect_desktop_watcher()

    def _setup_surface(self) -> None:
        config = self.shell.config_handler
        layer = config.get_root_setting(["status_area", "layer"], "TOP")
        margins = {
            "LEFT": config.get_root_setting(["status_area", "margin_left"], 0),
            "TOP": config.get_root_setting(["status_area", "margin_top"], 0),
        }
        setup_layer_shell(
            self,
            STATUS_AREA_NAMESPACE,
            layer=layer,
            anchors=("TOP", "LEFT"),
            margins=margins,
        )

    def _build_layout(self) -> None:
        self.main_box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=0)
        self.main_box.set_size_request(MINIMUM_STATUS_AREA_WIDTH, STATUS_AREA_HEIGHT)
        permanent = Gtk.Grid()
        permanent.add_css_class("status-area-permanent")
        self.clock_box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL)
        self.clock_box.add_css_class("status-area-clock")
        self.signal_image = _new_icon_image()
        self.signal_image.set_visible(False)
        self.battery_image = _new_icon_image()
        self.battery_image.set_visible(False)
        permanent.attach(self.clock_box, 0, 0, 2, 1)
        permanent.attach(self.signal_image, 0, 1, 1, 1)
        permanent.attach(self.battery_image, 1, 1, 1, 1)
        self.icon_box = StatusAreaBox()
        self.icon_box.set_valign(Gtk.Align.START)
        self.main_box.append(permanent)
        self.main_box.append(self.icon_box)
        self.set_child(self.main_box)

    def _connect_plugin_manager(self) -> None:
        if self.plugin_manager is None:
            self.logger.warning(
                "Status area created without a plugin manager. No plugin icons will be shown."
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

    def _connect_desktop_watcher(self) -> None:
        if self.desktop_watcher is None:
            return
        self._desktop_handlers = [
            self.desktop_watcher.connect("task-switcher-show", self._on_task_switcher_show),
            self.desktop_watcher.connect("task-switcher-hide", self._on_task_switcher_hide),
        ]
        if self.desktop_watcher.is_task_switcher_visible():
            self.status_area_visible = False

    def show_area(self) -> None:
        if self.status_area_visible:
            self.present()

    def _on_realize(self, *_):
        set_window_type(self, STATUS_AREA_WINDOW_TYPE, self.logger)

    def _on_released(self, gesture, n_press, x, y):
        self.shell.show_status_menu()

    def _on_task_switcher_show(self, *_):
        self.status_area_visible = False
        self.set_visible(False)

    def _on_task_switcher_hide(self, *_):
        self.status_area_visible = True
        self.present()

    def _on_plugin_added(self, plugin_manager, item):
        if not isinstance(item, StatusPluginItem) or item in self._entries:
            return
        plugin_id = item.props.plugin_id
        slot = claim_permanent_slot(
            plugin_manager.get_permanent_item(plugin_id),
            plugin_id,
            [entry.slot for entry in self._entries.values()],
            self.logger,
        )
        entry = _AreaEntry(slot=slot)
        if slot == "Clock":
            self._set_clock_widget(entry, item.props.status_area_widget)
            entry.handlers.append(
                item.connect("notify::status-area-widget", self._on_widget_changed)
            )
        else:
            if slot == "Signal":
                entry.image = self.signal_image
            elif slot == "Battery":
                entry.image = self.battery_image
            else:
                entry.image = _new_icon_image()
                position = plugin_manager.get_position(plugin_id, STATUS_AREA_POSITION_KEY)
                self.icon_box.pack(entry.image, position)
            _set_image_icon(entry.image, item.props.status_area_icon)
            entry.handlers.append(
                item.connect("notify::status-area-icon", self._on_icon_changed)
            )
        self._entries[item] = entry
        self.logger.debug(f"Status area: added {plugin_id} ({slot or 'icon'})")

    def _set_clock_widget(self, entry: _AreaEntry, widget: Optional[Gtk.Widget]) -> None:
        if entry.widget is not None and entry.widget.get_parent() is self.clock_box:
            self.clock_box.remove(entry.widget)
        entry.widget = widget
        if widget is not None:
            self.clock_box.append(widget)

    def _on_widget_changed(self, item, _pspec):
        entry = self._entries.get(item)
        if entry is not None:
            self._set_clock_widget(entry, item.props.status_area_widget)

    def _on_icon_changed(self, item, _pspec):
        entry = self._entries.get(item)
        if entry is not None and entry.image is not None:
            _set_image_icon(entry.image, item.props.status_area_icon)

    def _on_plugin_removed(self, plugin_manager, item):
        entry = self._entries.pop(item, None)
        if entry is None:
            return
        for handler_id in entry.handlers:
            item.disconnect(handler_id)
        if entry.slot == "Clock":
            self._set_clock_widget(entry, None)
        elif entry.slot in ("Signal", "Battery"):
            _set_image_icon(entry.image, "")  # pyright: ignore
        elif entry.image is not None:
            self.icon_box.remove(entry.image)
        self.logger.debug(f"Status area: removed {item.props.plugin_id}")

    def _on_items_configuration_loaded(self, plugin_manager):
        for item, entry in self._entries.items():
            if entry.slot is not None or entry.image is None:
                continue
            position = plugin_manager.get_position(
                item.props.plugin_id, STATUS_AREA_POSITION_KEY
            )
            self.icon_box.reorder_child(entry.image, position)

    def disconnect_all(self) -> None:
        for item in list(self._entries):
            self._on_plugin_removed(self.plugin_manager, item)
        for handler_id in self._plugin_handlers:
            self.plugin_manager.disconnect(handler_id)  # pyright: ignore
        self._plugin_handlers = []
        for handler_id in self._desktop_handlers:
            self.desktop_watcher.disconnect(handler_id)  # pyright: ignore
        self._desktop_handlers = []
