import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
from gi.repository import Gdk, Gtk  # pyright: ignore
from typing import Any, Dict, List, Tuple
from status_menu.core.layout import Rect
from status_menu.core.priority_list import POSITION_LAST, PriorityList


class PriorityBox(Gtk.Widget):
    """
    Container that keeps its children sorted by a numeric position and lays
    them out on a fixed grid. Subclasses provide the grid arithmetic through
    `_plan` and `_requisition`.
    """

    __gtype_name__ = "StatusMenuPriorityBox"

    def __init__(self, border_width: int = 0):
        super().__init__()
        self.border_width = border_width
        self._children = PriorityList()
        self._visibility_handlers: Dict[Any, int] = {}

    def _plan(self) -> Tuple[List[Tuple[Gtk.Widget, Rect]], List[Gtk.Widget]]:
        raise NotImplementedError

    def _requisition(self, n_visible: int) -> Tuple[int, int]:
        raise NotImplementedError

    def get_children(self) -> List[Gtk.Widget]:
        return list(self._children)

    def pack(self, child: Gtk.Widget, position: int = POSITION_LAST) -> None:
        """
        Adds `child` at `position`; lower positions come first.
        """
        if child.get_parent() is not None:
            raise ValueError(f"{child!r} already has a parent")
        self._children.insert(child, position)
        child.set_parent(self)
        self._visibility_handlers[child] = child.connect(
            "notify::visible", self._on_child_visible_changed
        )
        self._relayout()

    def append(self, child: Gtk.Widget) -> None:
        self.pack(child, POSITION_LAST)

    def reorder_child(self, child: Gtk.Widget, position: int) -> None:
        if child not in self._children:
            return
        if not self._children.reorder(child, position):
            return
        if child.get_visible() and self.get_visible():
            self._relayout()

    def remove(self, child: Gtk.Widget) -> None:
        entry = self._children.remove(child)
        if entry is None:
            return
        handler_id = self._visibility_handlers.pop(child, None)
        if handler_id is not None:
            child.disconnect(handler_id)
        visible = child.get_visible()
        child.unparent()
        if visible:
            self._relayout()

    def _on_child_visible_changed(self, child, _pspec) -> None:
        self._relayout()

    def _apply_child_visibility(self, placements, overflow) -> None:
        for child, _rect in placements:
            child.set_child_visible(True)
        for child in overflow:
            child.set_child_visible(False)

    def _relayout(self) -> None:
        self._apply_child_visibility(*self._plan())
        self.queue_resize()

    def _count_visible(self) -> int:
        return sum(1 for child in self._children if child.get_visible())

    def do_measure(self, orientation, for_size):
        width, height = self._requisition(self._count_visible())
        size = width if orientation == Gtk.Orientation.HORIZONTAL else height
        return size, size, -1, -1

    def do_size_allocate(self, width, height, baseline):
        placements, overflow = self._plan()
        self._apply_child_visibility(placements, overflow)
        for child, rect in placements:
            # children must be measured before they are allocated
            child.get_preferred_size()
            allocation = Gdk.Rectangle()
            allocation.x = rect.x
            allocation.y = rect.y
            allocation.width = rect.width
            allocation.height = rect.height
            child.size_allocate(allocation, -1)

    def do_dispose(self):
        for entry in self._children.clear():
            handler_id = self._visibility_handlers.pop(entry.widget, None)
            if handler_id is not None:
                entry.widget.disconnect(handler_id)
            entry.widget.unparent()
        super().do_dispose()
