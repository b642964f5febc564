def get_plugin_metadata(_):
    about = """
            • Shows the time in the status area and the date in the status menu.
            """
    return {
        "id": "org.statusmenu.plugin.clock",
        "name": "Clock",
        "version": "1.0.0",
        "permanent-item": "Clock",
        "status-menu-position": 0,
        "description": about,
    }


def get_plugin_class():
    import datetime
    from gi.repository import GLib, Gtk  # pyright: ignore
    from status_menu.ui.items import StatusPluginItem

    class ClockItem(StatusPluginItem):
        def __init__(self, shell, plugin_id):
            super().__init__(shell, plugin_id)
            self.time_format = shell.config_handler.get_item_setting(
                plugin_id, "time_format", "%H:%M"
            )
            self.date_format = shell.config_handler.get_item_setting(
                plugin_id, "date_format", "%A, %B %d, %Y"
            )
            self.update_timeout_id = None
            self.display_handlers = []
            self.time_label = None
            self.date_label = None

        def on_start(self):
            self.time_label = Gtk.Label()
            self.time_label.add_css_class("clock-label")
            icon = Gtk.Image.new_from_icon_name("x-office-calendar-symbolic")
            self.date_label = Gtk.Label()
            self.date_label.set_xalign(0)
            self.date_label.add_css_class("clock-date-label")
            self.append(icon)
            self.append(self.date_label)
            self.props.status_area_widget = self.time_label
            self.update_clock()
            display = self.shell.display_watcher
            if display is not None:
                self.display_handlers = [
                    display.connect("display-on", self._on_display_on),
                    display.connect("display-off", self._on_display_off),
                ]
                if display.is_on():
                    self.schedule_updates()
            else:
                self.schedule_updates()

        def on_stop(self):
            self.stop_updates()
            display = self.shell.display_watcher
            for handler_id in self.display_handlers:
                display.disconnect(handler_id)
            self.display_handlers = []
            self.props.status_area_widget = None

        def update_clock(self):
            now = datetime.datetime.now()
            try:
                self.time_label.set_label(now.strftime(self.time_format))  # pyright: ignore
                self.date_label.set_label(now.strftime(self.date_format))  # pyright: ignore
            except ValueError as e:
                self.logger.error(f"Error updating clock: {e}")

        def schedule_updates(self):
            """
            Re-arms a timeout that fires at the start of the next minute.
            """
            self.stop_updates()
            seconds_until_next_minute = 60 - datetime.datetime.now().second
            self.update_timeout_id = GLib.timeout_add_seconds(
                seconds_until_next_minute, self._update_and_reschedule
            )

        def _update_and_reschedule(self):
            self.update_timeout_id = None
            self.update_clock()
            self.schedule_updates()
            return False

        def stop_updates(self):
            if self.update_timeout_id:
                GLib.source_remove(self.update_timeout_id)
                self.update_timeout_id = None

        def _on_display_on(self, *_):
            self.update_clock()
            self.schedule_updates()

        def _on_display_off(self, *_):
            self.stop_updates()

    return ClockItem
