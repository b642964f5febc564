default_config = {
    "_section_hint": (
        "Configuration for the status area and the status menu of the mobile "
        "desktop shell."
    ),
    "status_area": {
        "_section_hint": "The persistent top-bar surface hosting status icons.",
        "layer": "TOP",
        "layer_hint": (
            "Layer-shell layer of the status area on Wayland "
            "('TOP' or 'OVERLAY')."
        ),
        "margin_left": 0,
        "margin_left_hint": "Distance in pixels from the left screen edge.",
        "margin_top": 0,
        "margin_top_hint": "Distance in pixels from the top screen edge.",
    },
    "status_menu": {
        "_section_hint": "The popup listing the full-size status plugin widgets.",
        "hide_on_display_off": True,
        "hide_on_display_off_hint": (
            "Close the status menu when the display is switched off."
        ),
    },
    "plugins": {
        "_section_hint": "Where status plugins are searched for.",
        "custom_path": "~/.local/share/status-menu/plugins",
        "custom_path_hint": (
            "Directory added to the import path for user-defined status plugins."
        ),
    },
    "items": {
        "_section_hint": (
            "One table per status plugin, keyed by plugin id. Keys: 'module', "
            "'enabled', 'status-area-position', 'status-menu-position', "
            "'permanent-item' ('Clock', 'Signal' or 'Battery')."
        ),
        "clock": {
            "module": "status_menu.plugins.clock",
            "enabled": True,
        },
        "battery": {
            "module": "status_menu.plugins.battery",
            "enabled": True,
        },
    },
}
