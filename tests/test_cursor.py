from __future__ import annotations

import random

from rich.text import Text

from judo.core.config import Theme
from judo.core.cursor import CURSOR_BLOCK, InputState


def test_insert_advances_cursor() -> None:
    st = InputState()
    for c in "abc":
        st.insert(c)
    assert st.text == "abc"
    assert st.cursor_position == 3


def test_insert_multibyte_in_middle() -> None:
    st = InputState(text="cafe", cursor_position=3)
    st.insert("é")
    assert st.text == "cafée"
    assert st.cursor_position == 4
    st.insert("✓")
    assert st.text == "café✓e"
    assert len(st.text) == 6


def test_insert_multibyte_at_every_position_roundtrips() -> None:
    base = "naïve ☕"
    for pos in range(len(base) + 1):
        st = InputState(text=base, cursor_position=pos)
        st.insert("ß")
        assert st.text == base[:pos] + "ß" + base[pos:]
        assert st.char_count == len(base) + 1
        assert st.cursor_position == pos + 1


def test_backspace_removes_multibyte_char() -> None:
    st = InputState(text="café", cursor_position=4)
    st.delete_before_cursor()
    assert st.text == "caf"
    assert st.cursor_position == 3


def test_backspace_at_start_is_noop() -> None:
    st = InputState(text="abc", cursor_position=0)
    st.delete_before_cursor()
    assert st.text == "abc"
    assert st.cursor_position == 0


def test_delete_after_cursor_keeps_position() -> None:
    st = InputState(text="éab", cursor_position=0)
    st.delete_after_cursor()
    assert st.text == "ab"
    assert st.cursor_position == 0


def test_delete_after_cursor_at_end_is_noop() -> None:
    st = InputState(text="ab", cursor_position=2)
    st.delete_after_cursor()
    assert st.text == "ab"
    assert st.cursor_position == 2


def test_moves_clamp() -> None:
    st = InputState(text="hé", cursor_position=0)
    st.move_left()
    assert st.cursor_position == 0
    st.move_right()
    st.move_right()
    st.move_right()
    assert st.cursor_position == 2
    st.move_home()
    assert st.cursor_position == 0
    st.move_end()
    assert st.cursor_position == 2


def test_reset_clears() -> None:
    st = InputState.prefilled("groceries")
    assert st.is_modifying
    assert st.cursor_position == len("groceries")
    st.reset()
    assert st.text == ""
    assert st.cursor_position == 0
    assert not st.is_modifying


def test_random_edit_sequences_keep_cursor_in_bounds() -> None:
    rng = random.Random(1234)
    alphabet = "aé☕ßz "
    for _ in range(50):
        st = InputState()
        for _ in range(60):
            op = rng.choice(["insert", "back", "del", "left", "right"])
            if op == "insert":
                st.insert(rng.choice(alphabet))
            elif op == "back":
                st.delete_before_cursor()
            elif op == "del":
                st.delete_after_cursor()
            elif op == "left":
                st.move_left()
            else:
                st.move_right()
            assert 0 <= st.cursor_position <= st.char_count


def test_render_spans_cursor_inside_text() -> None:
    theme = Theme()
    st = InputState(text="abc", cursor_position=1)
    spans = st.render_spans(theme)
    assert [s.plain for s in spans] == ["a", "b", "c"]
    assert all(isinstance(s, Text) for s in spans)
    # The character under the cursor is drawn inverted.
    cursor_style = spans[1].style
    assert str(cursor_style.bgcolor.name).lower() == theme.foreground.lower()


def test_render_spans_cursor_at_end_uses_block() -> None:
    st = InputState(text="ab", cursor_position=2)
    spans = st.render_spans(Theme())
    assert [s.plain for s in spans] == ["ab", CURSOR_BLOCK, ""]
    assert st.text == "ab"
    assert st.render_line(Theme()).plain == "ab" + CURSOR_BLOCK
