import sys
import types
from types import SimpleNamespace
import pytest
import toml

GObject = pytest.importorskip("gi.repository.GObject")

from status_menu.core.plugin_manager import PluginManager  # noqa: E402
from status_menu.shared.config_handler import (  # noqa: E402
    STATUS_MENU_POSITION_KEY,
    ConfigHandler,
)
from status_menu.shared.path_handler import PathHandler  # noqa: E402


class FakeItem(GObject.Object):
    def __init__(self, shell, plugin_id):
        super().__init__()
        self.plugin_id = plugin_id
        self.started = False
        self.stopped = False

    def on_start(self):
        self.started = True

    def on_stop(self):
        self.stopped = True


def make_module(name, metadata=None):
    module = types.ModuleType(name)
    module.get_plugin_metadata = lambda _: dict(metadata or {"id": name})
    module.get_plugin_class = lambda: FakeItem
    return module


@pytest.fixture
def shell(tmp_path, logger, monkeypatch):
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path / "run"))
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    with open(config_dir / "config.toml", "w") as f:
        toml.dump(
            {
                "items": {
                    "clock": {"enabled": False},
                    "battery": {"enabled": False},
                    "fake": {"module": "fake_status_plugin"},
                }
            },
            f,
        )
    monkeypatch.setitem(
        sys.modules,
        "fake_status_plugin",
        make_module("fake_status_plugin", {"id": "fake", STATUS_MENU_POSITION_KEY: 4}),
    )
    return SimpleNamespace(
        logger=logger,
        config_handler=ConfigHandler(logger, config_dir),
        path_handler=PathHandler(logger),
    )


def record(manager):
    events = []
    manager.connect("plugin-added", lambda pm, item: events.append(("added", item.plugin_id)))
    manager.connect("plugin-removed", lambda pm, item: events.append(("removed", item.plugin_id)))
    manager.connect("configuration-loaded", lambda pm: events.append(("configuration",)))
    manager.connect("items-configuration-loaded", lambda pm: events.append(("items",)))
    return events


def test_load_items_emits_in_order(shell):
    manager = PluginManager(shell)
    events = record(manager)
    manager.stamp.create()
    manager._load_items()
    assert events == [("configuration",), ("added", "fake"), ("items",)]
    assert manager.get_item("fake").started is True
    assert manager.stamp.exists() is False


def test_metadata_supplies_item_defaults(shell):
    manager = PluginManager(shell)
    manager._load_items()
    assert manager.get_position("fake", STATUS_MENU_POSITION_KEY) == 4


def test_broken_module_is_skipped(shell, logger):
    manager = PluginManager(shell)
    events = record(manager)
    assert manager.load_item("ghost", {"module": "no_such_status_plugin_module"}) is None
    assert manager.load_item("nameless", {}) is None
    assert events == []
    assert logger.error.call_count == 2


def test_config_reload_adds_and_removes(shell, monkeypatch):
    manager = PluginManager(shell)
    manager._load_items()
    events = record(manager)
    monkeypatch.setitem(sys.modules, "other_status_plugin", make_module("other_status_plugin"))
    items = shell.config_handler.config_data["items"]
    items["fake"]["enabled"] = False
    items["other"] = {"module": "other_status_plugin"}
    manager._on_config_reloaded(shell.config_handler.config_data)
    assert events == [("removed", "fake"), ("added", "other"), ("items",)]
    assert [item.plugin_id for item in manager.get_items()] == ["other"]


def test_shutdown_unloads_everything(shell):
    manager = PluginManager(shell)
    manager._load_items()
    item = manager.get_item("fake")
    manager.shutdown()
    assert item.stopped is True
    assert manager.get_items() == []
