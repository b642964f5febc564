import pytest
from status_menu.plugins.battery import battery_icon_name, get_plugin_metadata


@pytest.mark.parametrize(
    "percent, charging, expected",
    [
        (None, False, "battery-missing-symbolic"),
        (100, False, "battery-level-100-symbolic"),
        (54, False, "battery-level-50-symbolic"),
        (56, True, "battery-level-60-charging-symbolic"),
        (3, False, "battery-level-0-symbolic"),
    ],
)
def test_icon_name(percent, charging, expected):
    assert battery_icon_name(percent, charging) == expected


def test_metadata_claims_battery_slot():
    assert get_plugin_metadata(None)["permanent-item"] == "Battery"
