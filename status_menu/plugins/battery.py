BATTERY_POLL_SECONDS = 30


def battery_icon_name(percent, charging: bool) -> str:
    """
    Maps a charge level to a symbolic battery icon name.
    Args:
        percent: Charge in percent, or None when there is no battery.
        charging: Whether the battery is on AC power.
    """
    if percent is None:
        return "battery-missing-symbolic"
    level = int(max(0, min(100, round(percent / 10.0) * 10)))
    suffix = "-charging" if charging else ""
    return f"battery-level-{level}{suffix}-symbolic"


def get_plugin_metadata(_):
    return {
        "id": "org.statusmenu.plugin.battery",
        "name": "Battery",
        "version": "1.0.0",
        "permanent-item": "Battery",
        "status-menu-position": 1,
        "description": "Shows the battery charge level.",
    }


def get_plugin_class():
    import psutil
    from gi.repository import GLib, Gtk  # pyright: ignore
    from status_menu.ui.items import StatusPluginItem

    class BatteryItem(StatusPluginItem):
        def __init__(self, shell, plugin_id):
            super().__init__(shell, plugin_id)
            self.poll_id = None
            self.icon = Gtk.Image()
            self.label = Gtk.Label()
            self.label.set_xalign(0)
            self.label.add_css_class("battery-label")
            self.append(self.icon)
            self.append(self.label)

        def on_start(self):
            self.update_battery()
            self.poll_id = GLib.timeout_add_seconds(
                BATTERY_POLL_SECONDS, self._on_poll
            )

        def on_stop(self):
            if self.poll_id:
                GLib.source_remove(self.poll_id)
                self.poll_id = None

        def _on_poll(self):
            self.update_battery()
            return True

        def update_battery(self):
            try:
                battery = psutil.sensors_battery()
            except (OSError, RuntimeError) as e:
                self.logger.warning(f"Could not read battery state: {e}")
                battery = None
            if battery is None:
                icon_name = battery_icon_name(None, False)
                self.label.set_label("No battery")
            else:
                icon_name = battery_icon_name(battery.percent, bool(battery.power_plugged))
                state = "charging" if battery.power_plugged else "on battery"
                self.label.set_label(f"{battery.percent:.0f}% ({state})")
            self.icon.set_from_icon_name(icon_name)
            self.set_status_area_icon(icon_name)

    return BatteryItem
