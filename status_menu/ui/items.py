import gi

gi.require_version("Gtk", "4.0")
from gi.repository import GObject, Gtk  # pyright: ignore


class StatusMenuItem(Gtk.Box):
    """
    Base class of every status plugin. The item itself is the widget shown in
    the status menu; the menu emits `status-menu-map` and `status-menu-unmap`
    on it whenever the menu is shown or hidden so that a plugin can pause
    updates nobody can see.
    """

    __gtype_name__ = "StatusMenuItem"
    __gsignals__ = {
        "status-menu-map": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "status-menu-unmap": (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    plugin_id = GObject.Property(type=str, default="")

    def __init__(self, shell, plugin_id: str = ""):
        super().__init__(orientation=Gtk.Orientation.HORIZONTAL, spacing=8)
        self.shell = shell
        self.logger = shell.logger
        self.props.plugin_id = plugin_id
        self.add_css_class("status-menu-item")

    def on_start(self):
        """Called once after the item was constructed by the plugin manager."""

    def on_stop(self):
        """Called right before the plugin manager drops the item."""


class StatusPluginItem(StatusMenuItem):
    """
    Status menu item that can also put something in the status area: either
    an icon (`status-area-icon`, an icon name; empty means no icon) or a
    whole widget (`status-area-widget`) for the permanent clock slot.
    """

    __gtype_name__ = "StatusPluginItem"

    status_area_icon = GObject.Property(type=str, default="")
    status_area_widget = GObject.Property(type=Gtk.Widget)

    def set_status_area_icon(self, icon_name) -> None:
        icon_name = icon_name or ""
        if icon_name != self.props.status_area_icon:
            self.props.status_area_icon = icon_name
