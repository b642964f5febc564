import os
import lazy_loader as lazy
import gi

gi.require_version("Adw", "1")
gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Adw, Gdk, Gio, GLib, Gtk  # pyright: ignore
from status_menu.shared.config_handler import ConfigHandler
from status_menu.shared.path_handler import PathHandler

DBUS_HELPERS_MODULE = lazy.load("status_menu.shared.dbus_helpers")
DISPLAY_MODULE = lazy.load("status_menu.core.display")
DESKTOP_MODULE = lazy.load("status_menu.core.desktop")
PLUGIN_MANAGER_MODULE = lazy.load("status_menu.core.plugin_manager")
STATUS_AREA_MODULE = lazy.load("status_menu.ui.status_area")
STATUS_MENU_MODULE = lazy.load("status_menu.ui.status_menu")

APPLICATION_ID = "org.statusmenu.StatusMenu"
DSME_SIGNAL_IF = "com.nokia.dsme.signal"
DSME_SHUTDOWN_SIG = "shutdown_ind"
STYLE_FILE_NAME = "style.css"


class StatusShell(Adw.Application):
    def __init__(self, logger, application_id=APPLICATION_ID):
        """
        Creates the application; windows and watchers are built on activate.
        Args:
            logger: The application logger.
            application_id (str): The application ID.
        """
        super().__init__(application_id=application_id)
        self.logger = logger
        self.path_handler = PathHandler(logger)
        self.config_handler = ConfigHandler(logger)
        self.system_bus = None
        self.display_watcher = None
        self.desktop_watcher = None
        self.plugin_manager = None
        self.status_area = None
        self.status_menu = None
        self.css_provider = None
        self.connect("shutdown", self.on_shutdown)

    def do_activate(self):
        if self.status_area is not None:
            self.status_area.show_area()
            return
        self.logger.info("Activating status menu...")
        self.hold()
        self.system_bus = DBUS_HELPERS_MODULE.SignalBus(self.logger)  # pyright: ignore
        self.system_bus.subscribe(
            DSME_SIGNAL_IF, DSME_SHUTDOWN_SIG, self._on_shutdown_ind
        )
        self.system_bus.connect()
        self.display_watcher = DISPLAY_MODULE.get_display(  # pyright: ignore
            self.logger, self.system_bus
        )
        self.desktop_watcher = DESKTOP_MODULE.get_desktop(self.logger)  # pyright: ignore
        self.plugin_manager = PLUGIN_MANAGER_MODULE.PluginManager(self)  # pyright: ignore
        self.status_area = STATUS_AREA_MODULE.StatusArea(  # pyright: ignore
            self, self.plugin_manager, self.desktop_watcher
        )
        self.status_menu = STATUS_MENU_MODULE.StatusMenu(  # pyright: ignore
            self, self.plugin_manager, self.display_watcher
        )
        self.load_css()
        self.config_handler.start_watcher()
        self.status_area.show_area()
        GLib.idle_add(self.start_plugin_manager)
        self.logger.info("Application activation completed.")

    def start_plugin_manager(self):
        self.plugin_manager.run()  # pyright: ignore
        return False

    def load_css(self):
        """
        Loads the bundled stylesheet, then style.css from the config
        directory on top of it when present.
        """
        display = Gdk.Display.get_default()
        if display is None:
            return
        paths = [
            os.path.join(os.path.dirname(__file__), "resources", STYLE_FILE_NAME),
            str(self.path_handler.get_config_dir() / STYLE_FILE_NAME),
        ]
        for priority_offset, path in enumerate(paths):
            if not os.path.exists(path):
                continue
            css_provider = Gtk.CssProvider()
            try:
                css_provider.load_from_file(Gio.File.new_for_path(path))
            except GLib.Error as e:
                self.logger.error(f"Error loading CSS file {path}: {e}")
                continue
            Gtk.StyleContext.add_provider_for_display(
                display,
                css_provider,
                Gtk.STYLE_PROVIDER_PRIORITY_APPLICATION + priority_offset,
            )
            self.css_provider = css_provider

    def show_status_menu(self):
        if self.status_menu is not None:
            self.status_menu.show_menu()

    def _on_shutdown_ind(self, _body):
        self.logger.info("Device shutdown indicated. Quitting.")
        self.quit()

    def on_shutdown(self, *_):
        self.logger.info("Shutting down status menu...")
        if self.status_menu is not None:
            self.status_menu.disconnect_all()
        if self.status_area is not None:
            self.status_area.disconnect_all()
        if self.plugin_manager is not None:
            self.plugin_manager.shutdown()
        if self.display_watcher is not None:
            self.display_watcher.stop()
        if self.desktop_watcher is not None:
            self.desktop_watcher.stop()
        self.config_handler.stop_watcher()
        if self.system_bus is not None:
            self.system_bus.close()
