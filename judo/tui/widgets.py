"""Textual widgets for the judo TUI.

Each panel is a Static fed with rich Text built from the state machine's
data; the widgets hold no state of their own beyond what they last drew.
"""

from typing import Iterable, Optional, Sequence

from rich.markup import escape
from rich.style import Style
from rich.text import Text
from textual.widgets import Static

from judo.core.config import DBConfig, Theme
from judo.core.models import TodoItem, UIList
from judo.tui.models import SCREEN_SHORTCUTS
from judo.tui.state import Screen

HIGHLIGHT_SYMBOL = " ▸ "
BLANK_SYMBOL = "   "


def _selected_style(theme: Theme) -> Style:
    # Swap foreground and background for the selected row.
    return Style(color=theme.background, bgcolor=theme.foreground)


def render_rows(
    labels: Iterable[Text],
    selected: Optional[int],
    theme: Theme,
) -> Text:
    """Join rows into one Text, marking the selected row."""
    out = Text()
    for i, label in enumerate(labels):
        if i:
            out.append("\n")
        if i == selected:
            out.append(HIGHLIGHT_SYMBOL, style=Style(color=theme.highlight))
            row = label.copy()
            row.stylize(_selected_style(theme))
            out.append_text(row)
        else:
            out.append(BLANK_SYMBOL)
            out.append_text(label)
    return out


def item_label(item: TodoItem) -> Text:
    if item.is_done:
        return Text(item.name, style=Style(strike=True))
    return Text(item.name)


def render_lists(lists: Sequence[UIList], selected: Optional[int], theme: Theme) -> Text:
    return render_rows((Text(ui.list.name) for ui in lists), selected, theme)


def render_items(ui_list: Optional[UIList], theme: Theme) -> Text:
    if ui_list is None:
        return Text("")
    return render_rows((item_label(it) for it in ui_list.items), ui_list.item_state, theme)


def render_db_selector(
    dbs: Sequence[DBConfig],
    selected: int,
    default_name: str,
    theme: Theme,
) -> Text:
    labels = [Text(f"{db.name} *" if db.name == default_name else db.name) for db in dbs]
    return render_rows(labels, selected, theme)


class Panel(Static):
    """Bordered panel with a spaced-out title."""

    def __init__(self, title: str, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.border_title = title


class ListsPanel(Panel):
    def __init__(self, **kwargs) -> None:
        super().__init__("  L I S T S  ", **kwargs)
        self.border_subtitle = escape("w,s [A]dd [D]el [M]odify")

    def show(self, lists: Sequence[UIList], selected: Optional[int], theme: Theme) -> None:
        self.update(render_lists(lists, selected, theme))


class ItemsPanel(Panel):
    def __init__(self, **kwargs) -> None:
        super().__init__("  I T E M S  ", **kwargs)
        self.border_subtitle = escape("↓↑ [a]dd [d]el [m]odify  [q]uit")

    def show(self, ui_list: Optional[UIList], theme: Theme) -> None:
        self.update(render_items(ui_list, theme))


class DatabasePanel(Panel):
    def __init__(self, **kwargs) -> None:
        super().__init__("  D A T A B A S E  ", **kwargs)
        self.border_subtitle = escape("[C]hange")

    def show(self, name: str) -> None:
        self.update(Text(name))


class DatabaseSelector(Panel):
    """Dropdown listing the configured databases (default marked with *)."""

    def __init__(self, **kwargs) -> None:
        super().__init__(" Select Database ", **kwargs)
        self.border_subtitle = escape("↑↓ [A]dd [S]et Default [Esc]")

    def show(self, dbs: Sequence[DBConfig], selected: int, default_name: str, theme: Theme) -> None:
        self.update(render_db_selector(dbs, selected, default_name, theme))


class InputPopup(Panel):
    """Popup holding the text editor line; hidden unless it has the `open` class."""

    def __init__(self, **kwargs) -> None:
        super().__init__("", **kwargs)
        self.border_subtitle = escape("[Esc]")

    def open(self, title: str, line: Text, *, note: str = "") -> None:
        self.border_title = f"  {title}  "
        if note:
            line = Text.assemble(line, "\n", Text(note, style="dim"))
        self.update(line)
        self.add_class("open")

    def close(self) -> None:
        self.remove_class("open")
        self.update("")


class ScreenAwareFooter(Static):
    """Footer showing the shortcuts of the active screen."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.current_screen: Screen = Screen.MAIN

    def set_screen(self, screen: Screen) -> None:
        self.current_screen = screen
        self.refresh()

    def render(self) -> str:
        shortcuts = SCREEN_SHORTCUTS.get(self.current_screen, [])
        parts = [f"[bold]{key}[/] {desc}" for key, desc in shortcuts]
        return "  ".join(parts)


__all__ = [
    "ListsPanel",
    "ItemsPanel",
    "DatabasePanel",
    "DatabaseSelector",
    "InputPopup",
    "ScreenAwareFooter",
    "render_rows",
    "render_lists",
    "render_items",
    "render_db_selector",
]
