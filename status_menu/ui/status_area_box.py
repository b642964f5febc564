from status_menu.core.layout import (
    MAX_VISIBLE_CHILDREN,
    place_status_area_children,
    status_area_size,
)
from status_menu.ui.priority_box import PriorityBox


class StatusAreaBox(PriorityBox):
    """
    Two row icon grid of the status area. Only the first eight visible
    children are shown; the rest stay packed with their child-visible flag
    cleared until space frees up.
    """

    __gtype_name__ = "StatusAreaBox"

    def __init__(self, border_width: int = 0):
        super().__init__(border_width)
        self.max_visible_children = MAX_VISIBLE_CHILDREN

    def _plan(self):
        return place_status_area_children(
            self._children,
            lambda child: child.get_visible(),
            self.border_width,
            self.max_visible_children,
        )

    def _requisition(self, n_visible):
        return status_area_size(n_visible, self.border_width, self.max_visible_children)
