from __future__ import annotations

import asyncio
import json
from pathlib import Path


from judo.core.config import Config, Theme
from judo.core.models import TodoItem, TodoList, UIList
from judo.core.storage import Database
from judo.tui.debug import DebugLogger
from judo.tui.models import WidgetIds
from judo.tui.state import Screen
from judo.tui.widgets import render_db_selector, render_items, render_lists

from conftest import seed


def _seed_default(config: Config) -> None:
    db = Database.connect(config.get_default().connection_str)
    seed(db, {"Groceries": ["milk"], "Chores": []})
    db.close()


def test_render_lists_marks_selected_row() -> None:
    theme = Theme()
    lists = [UIList(list=TodoList(1, "a", 0)), UIList(list=TodoList(2, "b", 1))]
    out = render_lists(lists, 1, theme)
    assert out.plain == "   a\n ▸ b"
    assert render_lists(lists, None, theme).plain == "   a\n   b"


def test_render_items_strikes_done() -> None:
    ui = UIList(
        list=TodoList(1, "a", 0),
        items=[TodoItem(1, 1, "x", 0, is_done=True), TodoItem(2, 1, "y", 1)],
    )
    out = render_items(ui, Theme())
    assert out.plain == "   x\n   y"
    struck = [span for span in out.spans if getattr(span.style, "strike", False)]
    assert struck
    assert render_items(None, Theme()).plain == ""


def test_render_db_selector_marks_default(config: Config) -> None:
    out = render_db_selector(config.dbs, 1, "main", Theme())
    assert out.plain == "   main *\n ▸ work"


def test_debug_logger_is_env_gated(tmp_path: Path, monkeypatch) -> None:
    logger = DebugLogger(app=None)
    logger.log(event="key", data={"key": "a"})
    assert logger.debug_events == []

    trace = tmp_path / "trace.ndjson"
    monkeypatch.setenv("JUDO_TUI_DEBUG", "1")
    monkeypatch.setenv("JUDO_TUI_DEBUG_FILE", str(trace))
    logger.log(event="key", data={"key": "a"})
    logger.close_debug_file()
    assert len(logger.debug_events) == 1
    line = json.loads(trace.read_text(encoding="utf-8").strip())
    assert line["event"] == "key"
    assert line["data"] == {"key": "a"}


def test_tui_add_list_and_toggle_item(config: Config) -> None:
    _seed_default(config)

    async def _run() -> None:
        from judo.tui.app import JudoTuiApp

        app = JudoTuiApp.from_config(config)
        async with app.run_test() as pilot:
            m = app.machine
            assert m.lists_component.names() == ["Groceries", "Chores"]
            popup = app.query_one(f"#{WidgetIds.POPUP}")
            assert not popup.has_class("open")

            await pilot.press("A")
            await pilot.pause()
            assert m.screen is Screen.ADD_LIST
            assert popup.has_class("open")

            await pilot.press("N", "e", "w")
            await pilot.press("enter")
            await pilot.pause()
            assert m.screen is Screen.MAIN
            assert m.lists_component.names() == ["Groceries", "Chores", "New"]
            assert not popup.has_class("open")

            await pilot.press("s", "right", "enter")
            await pilot.pause()
            assert m.selected_list().selected_item().is_done is True

    asyncio.run(_run())


def test_tui_escape_discards_popup(config: Config) -> None:
    async def _run() -> None:
        from judo.tui.app import JudoTuiApp

        app = JudoTuiApp.from_config(config)
        async with app.run_test() as pilot:
            await pilot.press("A", "x", "escape")
            await pilot.pause()
            assert app.machine.screen is Screen.MAIN
            assert app.machine.lists_component.names() == []

    asyncio.run(_run())


def test_tui_change_db_toggles_selector(config: Config) -> None:
    async def _run() -> None:
        from judo.tui.app import JudoTuiApp

        app = JudoTuiApp.from_config(config)
        async with app.run_test() as pilot:
            selector = app.query_one(f"#{WidgetIds.DB_SELECTOR}")
            db_panel = app.query_one(f"#{WidgetIds.DB_PANEL}")
            assert not selector.has_class("open")

            await pilot.press("C")
            await pilot.pause()
            assert app.machine.screen is Screen.CHANGE_DB
            assert selector.has_class("open")
            assert db_panel.has_class("hidden")

            await pilot.press("down", "enter")
            await pilot.pause()
            assert app.machine.screen is Screen.MAIN
            assert app.machine.current_db_config.name == "work"
            assert not selector.has_class("open")

    asyncio.run(_run())


def test_tui_quit(config: Config) -> None:
    async def _run() -> None:
        from judo.tui.app import JudoTuiApp

        app = JudoTuiApp.from_config(config)
        async with app.run_test() as pilot:
            await pilot.press("q")
            await pilot.pause()
            assert app.machine.exit is True

    asyncio.run(_run())
