from typing import Dict, Iterable, Optional
import gi

gi.require_version("Gtk", "4.0")
from gi.repository import Gtk  # pyright: ignore

LAYERS = ("BACKGROUND", "BOTTOM", "TOP", "OVERLAY")
EDGES = ("LEFT", "RIGHT", "TOP", "BOTTOM")


def _layer_shell():
    try:
        gi.require_version("Gtk4LayerShell", "1.0")
        from gi.repository import Gtk4LayerShell as LayerShell  # pyright: ignore
    except (ImportError, ValueError):
        return None
    return LayerShell


def is_layer_shell_supported() -> bool:
    """True when running on a Wayland compositor that speaks wlr-layer-shell."""
    layer_shell = _layer_shell()
    if layer_shell is None:
        return False
    return bool(layer_shell.is_supported())


def setup_layer_shell(
    window: Gtk.Window,
    namespace: str,
    layer: str = "TOP",
    anchors: Iterable[str] = (),
    margins: Optional[Dict[str, int]] = None,
    exclusive_zone: Optional[int] = None,
) -> bool:
    """
    Turns `window` into a layer surface. Must run before the window is
    realized.
    Args:
        layer: one of BACKGROUND, BOTTOM, TOP, OVERLAY (case insensitive).
        anchors: edges the surface is attached to.
        margins: edge name to margin in pixels.
    Returns:
        False when layer shell is not available.
    """
    if not is_layer_shell_supported():
        return False
    LayerShell = _layer_shell()
    LayerShell.init_for_window(window)  # pyright: ignore
    LayerShell.set_namespace(window, namespace)  # pyright: ignore
    layer = layer.upper()
    if layer not in LAYERS:
        layer = "TOP"
    LayerShell.set_layer(window, getattr(LayerShell.Layer, layer))  # pyright: ignore
    for anchor in anchors:
        anchor = anchor.upper()
        if anchor in EDGES:
            LayerShell.set_anchor(window, getattr(LayerShell.Edge, anchor), True)  # pyright: ignore
    for edge, margin in (margins or {}).items():
        edge = edge.upper()
        if edge in EDGES:
            LayerShell.set_margin(window, getattr(LayerShell.Edge, edge), int(margin))  # pyright: ignore
    if exclusive_zone is not None:
        LayerShell.set_exclusive_zone(window, exclusive_zone)  # pyright: ignore
    return True


def set_margin(window: Gtk.Window, edge: str, margin: int) -> None:
    LayerShell = _layer_shell()
    if LayerShell is None or not LayerShell.is_layer_window(window):
        return
    LayerShell.set_margin(window, getattr(LayerShell.Edge, edge.upper()), int(margin))


def set_exclusive_keyboard(window: Gtk.Window, exclusive: bool) -> bool:
    """
    Switches the keyboard interactivity of a layer surface.
    Returns:
        False when `window` is not a layer surface.
    """
    LayerShell = _layer_shell()
    if LayerShell is None or not LayerShell.is_layer_window(window):
        return False
    mode = (
        LayerShell.KeyboardMode.EXCLUSIVE if exclusive else LayerShell.KeyboardMode.NONE
    )
    LayerShell.set_keyboard_mode(window, mode)
    return True
