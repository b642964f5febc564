from typing import Optional
import gi

gi.require_version("Gdk", "4.0")
from Xlib import Xatom
from Xlib import error as xerror
from Xlib import display as xdisplay

WINDOW_TYPE_ATOM = "_NET_WM_WINDOW_TYPE"
STATUS_AREA_WINDOW_TYPE = "_HILDON_WM_WINDOW_TYPE_STATUS_AREA"
APP_MENU_WINDOW_TYPE = "_HILDON_WM_WINDOW_TYPE_APP_MENU"


def _gdk_x11():
    try:
        gi.require_version("GdkX11", "4.0")
        from gi.repository import GdkX11  # pyright: ignore
    except (ImportError, ValueError):
        return None
    return GdkX11


def get_window_xid(window) -> Optional[int]:
    """
    Returns the X window id behind a realized Gtk.Window, or None when the
    window does not live on an X11 display.
    """
    gdk_x11 = _gdk_x11()
    if gdk_x11 is None:
        return None
    surface = window.get_surface()
    if not isinstance(surface, gdk_x11.X11Surface):
        return None
    return surface.get_xid()


def set_window_type(window, type_name: str, logger) -> bool:
    """
    Writes `_NET_WM_WINDOW_TYPE` on the X window of `window`.
    Args:
        window: a realized Gtk.Window.
        type_name: name of the window type atom.
    Returns:
        True when the property was written.
    """
    xid = get_window_xid(window)
    if xid is None:
        return False
    try:
        dpy = xdisplay.Display()
        try:
            xwindow = dpy.create_resource_object("window", xid)
            xwindow.change_property(
                dpy.intern_atom(WINDOW_TYPE_ATOM),
                Xatom.ATOM,
                32,
                [dpy.intern_atom(type_name)],
            )
            dpy.flush()
        finally:
            dpy.close()
    except (xerror.DisplayError, xerror.XError, OSError) as e:
        logger.warning(f"Failed to set window type {type_name}: {e}")
        return False
    logger.debug(f"Window type of 0x{xid:x} set to {type_name}")
    return True


def move_window(window, x: int, y: int, logger) -> bool:
    """Moves the X window of a realized Gtk.Window to root coordinates (x, y)."""
    xid = get_window_xid(window)
    if xid is None:
        return False
    try:
        dpy = xdisplay.Display()
        try:
            dpy.create_resource_object("window", xid).configure(x=x, y=y)
            dpy.flush()
        finally:
            dpy.close()
    except (xerror.DisplayError, xerror.XError, OSError) as e:
        logger.warning(f"Failed to move window 0x{xid:x}: {e}")
        return False
    return True
