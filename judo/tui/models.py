"""Widget ids and per-screen shortcut hints for the TUI."""

from judo.tui.state import Screen


class WidgetIds:
    """Widget ID constants for a stable test API."""

    LOGO = "logo"
    DB_PANEL = "db_panel"
    LISTS_PANEL = "lists_panel"
    ITEMS_PANEL = "items_panel"
    POPUP = "popup"
    DB_SELECTOR = "db_selector"
    STATUS = "status"
    FOOTER = "screen_footer"


LOGO = "\n".join(
    [
        "   _           _       ",
        "  (_)_  _  __| | ___  ",
        "  | | || |/ _` |/ _ \\ ",
        " _/ |\\_,_|\\__,_|\\___/ ",
        "|__/                  ",
    ]
)

# Hints rendered in the footer for each screen
SCREEN_SHORTCUTS = {
    Screen.MAIN: [
        ("w/s", "Lists"),
        ("W/S", "Move list"),
        ("A/M/D", "Add/Modify/Del list"),
        ("↑↓", "Items"),
        ("Shift+↑↓", "Move item"),
        ("a/m/d", "Add/Modify/Del item"),
        ("Enter", "Done"),
        ("C", "Change DB"),
        ("q", "Quit"),
    ],
    Screen.ADD_LIST: [("Enter", "Save"), ("Esc", "Cancel")],
    Screen.MODIFY_LIST: [("Enter", "Save"), ("Esc", "Cancel")],
    Screen.ADD_ITEM: [("Enter", "Save"), ("Esc", "Cancel")],
    Screen.MODIFY_ITEM: [("Enter", "Save"), ("Esc", "Cancel")],
    Screen.CHANGE_DB: [
        ("↑↓", "Navigate"),
        ("Enter", "Switch"),
        ("A", "Add"),
        ("S", "Set default"),
        ("Esc", "Back"),
    ],
    Screen.ADD_DB: [("Enter", "Create"), ("Tab", "Toggle default"), ("Esc", "Cancel")],
}


__all__ = ["WidgetIds", "LOGO", "SCREEN_SHORTCUTS"]
