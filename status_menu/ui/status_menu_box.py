from gi.repository import GObject  # pyright: ignore
from status_menu.core.layout import (
    STATUS_MENU_COLUMNS,
    place_status_menu_children,
    status_menu_size,
)
from status_menu.ui.priority_box import PriorityBox


class StatusMenuBox(PriorityBox):
    """Grid of full-size status menu items, `columns` wide."""

    __gtype_name__ = "StatusMenuBox"

    def __init__(self, border_width: int = 0, columns: int = STATUS_MENU_COLUMNS):
        super().__init__(border_width)
        self._columns = columns

    @GObject.Property(type=int, default=STATUS_MENU_COLUMNS, minimum=1)
    def columns(self):  # pyright: ignore
        return self._columns

    @columns.setter
    def columns(self, value):
        if value != self._columns:
            self._columns = value
            self.queue_resize()

    def _plan(self):
        placements = place_status_menu_children(
            self._children,
            lambda child: child.get_visible(),
            self._columns,
            self.border_width,
        )
        return placements, []

    def _requisition(self, n_visible):
        return status_menu_size(n_visible, self._columns, self.border_width)

    def natural_height(self, columns: int) -> int:
        """Height the box would request with `columns` columns."""
        return status_menu_size(self._count_visible(), columns, self.border_width)[1]
