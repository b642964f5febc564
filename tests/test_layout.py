import pytest
from status_menu.core.layout import (
    MAX_VISIBLE_CHILDREN,
    Rect,
    place_status_area_children,
    place_status_menu_children,
    status_area_size,
    status_area_slot,
    status_menu_geometry,
    status_menu_size,
    status_menu_slot,
)


def visible(widget):
    return widget.visible


@pytest.mark.parametrize(
    "n_visible, expected",
    [
        (0, (0, 0)),
        (1, (22, 38)),
        (2, (22, 38)),
        (3, (42, 38)),
        (8, (82, 38)),
        (12, (82, 38)),
    ],
)
def test_status_area_size(n_visible, expected):
    assert status_area_size(n_visible) == expected


def test_status_area_size_with_border():
    assert status_area_size(1, border_width=2) == (26, 42)


def test_status_area_slots_fill_columns_top_to_bottom():
    assert status_area_slot(0) == Rect(4, 0, 18, 18)
    assert status_area_slot(1) == Rect(4, 20, 18, 18)
    assert status_area_slot(2) == Rect(24, 0, 18, 18)
    assert status_area_slot(7) == Rect(64, 20, 18, 18)


def test_status_area_caps_visible_children(make_widgets):
    widgets = make_widgets(*"abcdefghij")
    placements, overflow = place_status_area_children(widgets, visible)
    assert [child for child, _ in placements] == widgets[:MAX_VISIBLE_CHILDREN]
    assert overflow == widgets[MAX_VISIBLE_CHILDREN:]


def test_status_area_hidden_children_take_no_slot(make_widgets):
    a, b, c = make_widgets("a", "b", "c")
    b.visible = False
    placements, overflow = place_status_area_children([a, b, c], visible)
    assert placements == [(a, status_area_slot(0)), (c, status_area_slot(1))]
    assert overflow == []


def test_status_area_hidden_children_after_capacity_overflow(make_widgets):
    widgets = make_widgets(*"abcdefghi")
    widgets[-1].visible = False
    placements, overflow = place_status_area_children(widgets, visible)
    assert len(placements) == MAX_VISIBLE_CHILDREN
    assert overflow == [widgets[-1]]


def test_status_menu_size():
    assert status_menu_size(0) == (656, 70)
    assert status_menu_size(3) == (656, 140)
    assert status_menu_size(3, columns=1) == (328, 210)
    assert status_menu_size(4, border_width=5) == (666, 150)


def test_status_menu_slots_fill_rows():
    assert status_menu_slot(0) == Rect(0, 0, 328, 70)
    assert status_menu_slot(1) == Rect(328, 0, 328, 70)
    assert status_menu_slot(2) == Rect(0, 70, 328, 70)
    assert status_menu_slot(2, columns=1) == Rect(0, 140, 328, 70)


def test_status_menu_skips_hidden(make_widgets):
    a, b, c = make_widgets("a", "b", "c")
    a.visible = False
    placements = place_status_menu_children([a, b, c], visible)
    assert placements == [(b, status_menu_slot(0)), (c, status_menu_slot(1))]


def test_menu_geometry_landscape():
    geometry = status_menu_geometry(800, 480, 140)
    assert geometry.columns == 2
    assert (geometry.pane_width, geometry.pane_height) == (656, 140)
    assert (geometry.width, geometry.height) == (664, 148)
    assert (geometry.x, geometry.y) == (68, 166)


def test_menu_geometry_portrait():
    geometry = status_menu_geometry(480, 800, 700)
    assert geometry.columns == 1
    assert (geometry.pane_width, geometry.pane_height) == (328, 700)
    assert (geometry.x, geometry.y) == (72, 46)


def test_menu_geometry_narrow_landscape_uses_one_column():
    assert status_menu_geometry(640, 480, 70).columns == 1


def test_menu_geometry_caps_pane_height():
    geometry = status_menu_geometry(800, 480, 5000)
    assert geometry.pane_height == 400


def test_menu_geometry_minimum_pane_height():
    assert status_menu_geometry(800, 480, 0).pane_height == 70
