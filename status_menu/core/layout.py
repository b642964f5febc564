"""
Layout arithmetic for the status area and status menu.

Everything here is plain integer math so the containers only have to hand
over their children and visibility flags and apply the resulting rectangles.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Tuple

# Status area style guide
STATUS_AREA_ITEM_WIDTH = 18
STATUS_AREA_ITEM_HEIGHT = 18
STATUS_AREA_SPACING = 2
STATUS_AREA_PADDING_LEFT = 4
STATUS_AREA_ROWS = 2
MAX_VISIBLE_CHILDREN = 8

STATUS_AREA_HEIGHT = 56
MINIMUM_STATUS_AREA_WIDTH = 112

# Status menu style guide
STATUS_MENU_ITEM_WIDTH = 328
STATUS_MENU_ITEM_HEIGHT = 70
STATUS_MENU_COLUMNS = 2
STATUS_MENU_INNER_BORDER = 4
STATUS_MENU_EXTERNAL_BORDER = 40


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class MenuGeometry:
    columns: int
    pane_width: int
    pane_height: int
    padding: int
    x: int
    y: int
    width: int
    height: int


def _ceil_div(a: int, b: int) -> int:
    return -(-a // b)


def status_area_slot(index: int, border_width: int = 0) -> Rect:
    """Rectangle of the index-th visible icon, filling columns top to bottom."""
    column, row = divmod(index, STATUS_AREA_ROWS)
    return Rect(
        x=border_width
        + STATUS_AREA_PADDING_LEFT
        + column * (STATUS_AREA_ITEM_WIDTH + STATUS_AREA_SPACING),
        y=border_width + row * (STATUS_AREA_ITEM_HEIGHT + STATUS_AREA_SPACING),
        width=STATUS_AREA_ITEM_WIDTH,
        height=STATUS_AREA_ITEM_HEIGHT,
    )


def status_area_size(
    n_visible: int, border_width: int = 0, capacity: int = MAX_VISIBLE_CHILDREN
) -> Tuple[int, int]:
    """
    Requisition of the status area icon grid.
    Args:
        n_visible: Number of visible children, capped at `capacity`.
        border_width: Border around the grid.
        capacity: Maximum number of icons shown.
    Returns:
        (width, height), (0, 0) when nothing is visible.
    """
    n_visible = min(capacity, n_visible)
    if n_visible <= 0:
        return 0, 0
    columns = _ceil_div(n_visible, STATUS_AREA_ROWS)
    width = (
        2 * border_width
        + STATUS_AREA_PADDING_LEFT
        + columns * STATUS_AREA_ITEM_WIDTH
        + (columns - 1) * STATUS_AREA_SPACING
    )
    height = (
        2 * border_width
        + STATUS_AREA_ROWS * STATUS_AREA_ITEM_HEIGHT
        + (STATUS_AREA_ROWS - 1) * STATUS_AREA_SPACING
    )
    return width, height


def place_status_area_children(
    children: Iterable[Any],
    is_visible: Callable[[Any], bool],
    border_width: int = 0,
    capacity: int = MAX_VISIBLE_CHILDREN,
) -> Tuple[List[Tuple[Any, Rect]], List[Any]]:
    """
    Places visible children in priority order until the capacity is reached.
    Hidden children before that point are skipped and left alone; every
    child after it is returned as overflow.
    Returns:
        A list of (child, rect) placements and the list of overflow children.
    """
    placements: List[Tuple[Any, Rect]] = []
    overflow: List[Any] = []
    for child in children:
        if len(placements) >= capacity:
            overflow.append(child)
            continue
        if not is_visible(child):
            continue
        placements.append((child, status_area_slot(len(placements), border_width)))
    return placements, overflow


def status_menu_slot(
    index: int, columns: int = STATUS_MENU_COLUMNS, border_width: int = 0
) -> Rect:
    row, column = divmod(index, columns)
    return Rect(
        x=border_width + column * STATUS_MENU_ITEM_WIDTH,
        y=border_width + row * STATUS_MENU_ITEM_HEIGHT,
        width=STATUS_MENU_ITEM_WIDTH,
        height=STATUS_MENU_ITEM_HEIGHT,
    )


def status_menu_size(
    n_visible: int, columns: int = STATUS_MENU_COLUMNS, border_width: int = 0
) -> Tuple[int, int]:
    """Width is always `columns` items, height at least one row."""
    rows = max(_ceil_div(max(n_visible, 0), columns), 1)
    return (
        columns * STATUS_MENU_ITEM_WIDTH + 2 * border_width,
        rows * STATUS_MENU_ITEM_HEIGHT + 2 * border_width,
    )


def place_status_menu_children(
    children: Iterable[Any],
    is_visible: Callable[[Any], bool],
    columns: int = STATUS_MENU_COLUMNS,
    border_width: int = 0,
) -> List[Tuple[Any, Rect]]:
    placements: List[Tuple[Any, Rect]] = []
    for child in children:
        if not is_visible(child):
            continue
        placements.append(
            (child, status_menu_slot(len(placements), columns, border_width))
        )
    return placements


def status_menu_geometry(
    screen_width: int, screen_height: int, content_height: int
) -> MenuGeometry:
    """
    Computes the status menu pane for the current screen orientation.
    Landscape screens get two columns when they fit, portrait screens one.
    The pane is capped to the screen height minus the external border and the
    window is centred.
    Args:
        screen_width: Monitor width in pixels.
        screen_height: Monitor height in pixels.
        content_height: Natural height of the menu box for the chosen columns.
    """
    padding = STATUS_MENU_INNER_BORDER
    landscape = screen_width >= screen_height
    two_columns_width = STATUS_MENU_COLUMNS * STATUS_MENU_ITEM_WIDTH + 2 * padding
    columns = STATUS_MENU_COLUMNS if landscape and screen_width >= two_columns_width else 1
    pane_width = columns * STATUS_MENU_ITEM_WIDTH
    max_pane_height = max(
        screen_height - 2 * STATUS_MENU_EXTERNAL_BORDER, STATUS_MENU_ITEM_HEIGHT
    )
    pane_height = min(max(content_height, STATUS_MENU_ITEM_HEIGHT), max_pane_height)
    width = pane_width + 2 * padding
    height = pane_height + 2 * padding
    return MenuGeometry(
        columns=columns,
        pane_width=pane_width,
        pane_height=pane_height,
        padding=padding,
        x=max((screen_width - width) // 2, 0),
        y=max((screen_height - height) // 2, 0),
        width=width,
        height=height,
    )
