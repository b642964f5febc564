from unittest.mock import MagicMock
import toml
from status_menu.core.priority_list import POSITION_LAST
from status_menu.shared.config_handler import (
    PERMANENT_ITEM_KEY,
    STATUS_AREA_POSITION_KEY,
    STATUS_MENU_POSITION_KEY,
    ConfigHandler,
)


def write_config(tmp_path, data):
    with open(tmp_path / "config.toml", "w") as f:
        toml.dump(data, f)


def test_missing_file_is_created_without_hints(tmp_path, logger):
    handler = ConfigHandler(logger, tmp_path)
    assert handler.config_file.exists()
    written = toml.load(handler.config_file)
    assert written["status_area"]["layer"] == "TOP"
    assert "_section_hint" not in written
    assert "layer_hint" not in written["status_area"]
    assert handler.get_root_setting(["status_menu", "hide_on_display_off"]) is True


def test_user_values_win_and_defaults_fill_in(tmp_path, logger):
    write_config(tmp_path, {"status_area": {"layer": "OVERLAY"}})
    handler = ConfigHandler(logger, tmp_path)
    assert handler.get_root_setting(["status_area", "layer"]) == "OVERLAY"
    assert handler.get_root_setting(["status_area", "margin_top"]) == 0


def test_corrupt_file_falls_back_and_is_not_overwritten(tmp_path, logger):
    config_file = tmp_path / "config.toml"
    config_file.write_text("this is [ not toml")
    handler = ConfigHandler(logger, tmp_path)
    assert handler.get_root_setting(["status_area", "layer"]) == "TOP"
    logger.error.assert_called()
    assert handler.set_root_setting(["status_area", "layer"], "OVERLAY") is False
    assert config_file.read_text() == "this is [ not toml"


def test_get_root_setting_default(tmp_path, logger):
    handler = ConfigHandler(logger, tmp_path)
    assert handler.get_root_setting(["nope", "missing"], 42) == 42


def test_set_root_setting_saves(tmp_path, logger):
    handler = ConfigHandler(logger, tmp_path)
    assert handler.set_root_setting(["status_area", "margin_left"], 12) is True
    assert toml.load(handler.config_file)["status_area"]["margin_left"] == 12


def test_reload_notifies_listeners(tmp_path, logger):
    handler = ConfigHandler(logger, tmp_path)
    seen = []
    handler.add_reload_listener(lambda data: seen.append(data["status_area"]["layer"]))
    data = toml.load(handler.config_file)
    data["status_area"]["layer"] = "OVERLAY"
    write_config(tmp_path, data)
    handler.reload_config()
    assert seen == ["OVERLAY"]
    assert handler.get_root_setting(["status_area", "layer"]) == "OVERLAY"


def test_items_include_bundled_plugins(tmp_path, logger):
    handler = ConfigHandler(logger, tmp_path)
    items = handler.get_items()
    assert items["clock"]["module"] == "status_menu.plugins.clock"
    assert items["battery"]["enabled"] is True


def test_item_positions(tmp_path, logger):
    write_config(
        tmp_path,
        {
            "items": {
                "wifi": {
                    "module": "wifi",
                    STATUS_AREA_POSITION_KEY: 3,
                    STATUS_MENU_POSITION_KEY: "first",
                },
                "bt": {"module": "bt", STATUS_AREA_POSITION_KEY: -4},
            }
        },
    )
    handler = ConfigHandler(logger, tmp_path)
    assert handler.get_item_position("wifi", STATUS_AREA_POSITION_KEY) == 3
    assert handler.get_item_position("wifi", STATUS_MENU_POSITION_KEY) == POSITION_LAST
    assert handler.get_item_position("bt", STATUS_AREA_POSITION_KEY) == POSITION_LAST
    assert handler.get_item_position("bt", STATUS_MENU_POSITION_KEY) == POSITION_LAST
    assert logger.warning.call_count == 2


def test_item_defaults_apply_below_config(tmp_path, logger):
    write_config(tmp_path, {"items": {"wifi": {"module": "wifi", STATUS_MENU_POSITION_KEY: 9}}})
    handler = ConfigHandler(logger, tmp_path)
    handler.set_item_defaults("wifi", {STATUS_MENU_POSITION_KEY: 1, STATUS_AREA_POSITION_KEY: 2})
    assert handler.get_item_position("wifi", STATUS_MENU_POSITION_KEY) == 9
    assert handler.get_item_position("wifi", STATUS_AREA_POSITION_KEY) == 2


def test_permanent_item(tmp_path, logger):
    write_config(
        tmp_path,
        {
            "items": {
                "signal": {"module": "signal", PERMANENT_ITEM_KEY: "Signal"},
                "weird": {"module": "weird", PERMANENT_ITEM_KEY: "Toaster"},
                "plain": {"module": "plain", PERMANENT_ITEM_KEY: ""},
            }
        },
    )
    handler = ConfigHandler(logger, tmp_path)
    assert handler.get_permanent_item("signal") == "Signal"
    assert handler.get_permanent_item("plain") is None
    assert handler.get_permanent_item("missing") is None
    assert handler.get_permanent_item("weird") is None
    logger.warning.assert_called_once()
    handler.set_item_defaults("clock", {PERMANENT_ITEM_KEY: "Clock"})
    assert handler.get_permanent_item("clock") == "Clock"


def test_broken_reload_keeps_current_config(tmp_path, logger):
    write_config(tmp_path, {"items": {"mine": {"module": "mine"}}})
    handler = ConfigHandler(logger, tmp_path)
    assert "mine" in handler.get_items()
    listener = MagicMock()
    handler.add_reload_listener(listener)
    (tmp_path / "config.toml").write_text("[items.mine\nmodule = ")
    handler.reload_config()
    assert "mine" in handler.get_items()
    assert handler.get_item_setting("mine", "module") == "mine"
    listener.assert_not_called()
    logger.error.assert_called()
    write_config(tmp_path, {"items": {"mine": {"module": "other"}}})
    handler.reload_config()
    assert handler.get_item_setting("mine", "module") == "other"
    listener.assert_called_once()
