"""Textual application for judo.

The app is a thin shell around ScreenStateMachine: every key press is handed
to `machine.handle_key` and afterwards the whole view is redrawn from the
machine's state. Storage calls run synchronously inside the key handler, so
no second key is processed until the current command has finished.
"""

from __future__ import annotations

from typing import Optional

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Static

from judo.core.config import Config
from judo.tui.debug import DebugLogger
from judo.tui.models import LOGO, WidgetIds
from judo.tui.state import Screen, ScreenStateMachine
from judo.tui.widgets import (
    DatabasePanel,
    DatabaseSelector,
    InputPopup,
    ItemsPanel,
    ListsPanel,
    ScreenAwareFooter,
)


class JudoTuiApp(App):
    """Keyboard-driven manager for ordered to-do lists."""

    CSS_PATH = "theme.tcss"
    TITLE = "Judo"

    def __init__(self, machine: ScreenStateMachine) -> None:
        super().__init__()
        self.machine = machine
        self._debug_logger = DebugLogger(self)

    @classmethod
    def from_config(cls, config: Config) -> "JudoTuiApp":
        return cls(ScreenStateMachine.from_config(config))

    @property
    def theme_colours(self):
        return self.machine.config.colours

    def _dbg(self, *, event: str, data: Optional[dict[str, object]] = None) -> None:
        self._debug_logger.log(event=event, data=data)

    # -----------------------
    # Compose
    # -----------------------
    def compose(self) -> ComposeResult:
        with Horizontal(id="header"):
            yield Static(LOGO, id=WidgetIds.LOGO)
            with Vertical(id="db_column"):
                yield DatabasePanel(id=WidgetIds.DB_PANEL)
                yield DatabaseSelector(id=WidgetIds.DB_SELECTOR)
        with Horizontal(id="content"):
            yield ListsPanel(id=WidgetIds.LISTS_PANEL)
            yield ItemsPanel(id=WidgetIds.ITEMS_PANEL)
        yield InputPopup(id=WidgetIds.POPUP)
        yield Static("", id=WidgetIds.STATUS, classes="muted")
        yield ScreenAwareFooter(id=WidgetIds.FOOTER, classes="footer")

    def on_mount(self) -> None:
        theme = self.theme_colours
        self.screen.styles.background = theme.background
        self.screen.styles.color = theme.foreground
        self._render_all()

    def on_unmount(self) -> None:
        self._debug_logger.close_debug_file()
        self.machine.close()

    # -----------------------
    # Rendering
    # -----------------------
    def _render_all(self) -> None:
        m = self.machine
        theme = self.theme_colours
        screen = m.screen

        self.query_one(f"#{WidgetIds.DB_PANEL}", DatabasePanel).show(m.current_db_config.name)
        self.query_one(f"#{WidgetIds.LISTS_PANEL}", ListsPanel).show(
            m.lists_component.lists, m.lists_component.list_state, theme
        )
        self.query_one(f"#{WidgetIds.ITEMS_PANEL}", ItemsPanel).show(m.selected_list(), theme)

        selector = self.query_one(f"#{WidgetIds.DB_SELECTOR}", DatabaseSelector)
        db_panel = self.query_one(f"#{WidgetIds.DB_PANEL}", DatabasePanel)
        in_db_screens = screen in (Screen.CHANGE_DB, Screen.ADD_DB)
        selector.set_class(in_db_screens, "open")
        db_panel.set_class(in_db_screens, "hidden")
        if in_db_screens:
            selector.show(m.config.dbs, m.selected_db_index, m.config.default, theme)

        popup = self.query_one(f"#{WidgetIds.POPUP}", InputPopup)
        title = m.popup_title()
        if title is None:
            popup.close()
        else:
            note = ""
            if screen is Screen.ADD_DB:
                note = f"Set as default: {'yes' if m.set_as_default else 'no'} (Tab)"
            popup.open(title, m.input_state.render_line(theme), note=note)

        self.query_one(f"#{WidgetIds.STATUS}", Static).update(m.status)
        self.query_one(f"#{WidgetIds.FOOTER}", ScreenAwareFooter).set_screen(screen)

    # -----------------------
    # Input
    # -----------------------
    def on_key(self, event) -> None:  # type: ignore[override]
        key = str(getattr(event, "key", "") or "")
        character = getattr(event, "character", None)
        before = self.machine.screen
        handled = self.machine.handle_key(key, character)
        self._dbg(
            event="key",
            data={
                "key": key,
                "character": character,
                "handled": handled,
                "from": before.value,
                "to": self.machine.screen.value,
                "status": self.machine.status,
            },
        )
        if handled:
            event.stop()
            event.prevent_default()
        if self.machine.exit:
            self.exit()
            return
        self._render_all()


__all__ = ["JudoTuiApp"]
