"""
Single-line text editing with a visible insertion point.

Every name-entry popup (add/modify list, add/modify item, add database) edits
its text through an InputState. The cursor is a *character* offset into the
text, never a byte offset, so multi-byte characters such as "é" or "✓" move,
insert and delete as one unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol

from rich.style import Style
from rich.text import Text


# Shown in place of a character when the cursor sits past the end of the text.
CURSOR_BLOCK = "█"


class ThemeLike(Protocol):
    foreground: str
    background: str


@dataclass
class InputState:
    """Text buffer plus cursor position for a popup.

    `is_modifying` tells the commit step whether the text renames an existing
    entity (True) or creates a new one (False).
    """

    text: str = ""
    cursor_position: int = 0
    is_modifying: bool = False

    @classmethod
    def prefilled(cls, text: str) -> "InputState":
        """Editor for renaming: holds the current name with the cursor at its end."""
        return cls(text=text, cursor_position=len(text), is_modifying=True)

    @property
    def char_count(self) -> int:
        return len(self.text)

    def _clamped(self) -> int:
        return max(0, min(self.cursor_position, self.char_count))

    def insert(self, c: str) -> None:
        """Insert `c` at the cursor and advance past it."""
        if not c:
            return
        pos = self._clamped()
        self.text = self.text[:pos] + c + self.text[pos:]
        self.cursor_position = pos + len(c)

    def delete_before_cursor(self) -> None:
        """Backspace."""
        pos = self._clamped()
        if pos == 0:
            return
        self.text = self.text[: pos - 1] + self.text[pos:]
        self.cursor_position = pos - 1

    def delete_after_cursor(self) -> None:
        """Delete key; the cursor stays where it is."""
        pos = self._clamped()
        if pos >= self.char_count:
            return
        self.text = self.text[:pos] + self.text[pos + 1 :]
        self.cursor_position = pos

    def move_left(self) -> None:
        self.cursor_position = max(0, self._clamped() - 1)

    def move_right(self) -> None:
        self.cursor_position = min(self.char_count, self._clamped() + 1)

    def move_home(self) -> None:
        self.cursor_position = 0

    def move_end(self) -> None:
        self.cursor_position = self.char_count

    def reset(self) -> None:
        """Clear the text and put the cursor back at the start."""
        self.text = ""
        self.cursor_position = 0
        self.is_modifying = False

    def segments(self) -> tuple[str, str, str]:
        """Split the text around the cursor: (before, at_cursor, after).

        `at_cursor` is the empty string when the cursor is at end-of-text.
        """
        pos = self._clamped()
        before = self.text[:pos]
        at = self.text[pos : pos + 1]
        after = self.text[pos + 1 :]
        return before, at, after

    def render_spans(self, theme: ThemeLike) -> List[Text]:
        """
        Build the three display segments for a popup.

        The character under the cursor is drawn with foreground and background
        swapped. At end-of-text a block glyph stands in for the cursor.

        Args:
            theme: Anything exposing `foreground` and `background` colour strings

        Returns:
            [text_before, cursor_glyph, text_after] as rich Text objects
        """
        fg = theme.foreground
        bg = theme.background
        before, at, after = self.segments()

        if at:
            cursor = Text(at, style=Style(color=bg, bgcolor=fg))
        else:
            cursor = Text(CURSOR_BLOCK, style=Style(color=fg, bgcolor=bg))

        return [
            Text(before, style=Style(color=fg)),
            cursor,
            Text(after, style=Style(color=fg)),
        ]

    def render_line(self, theme: ThemeLike) -> Text:
        """The three spans joined into one line."""
        return Text.assemble(*self.render_spans(theme))


__all__ = ["InputState", "CURSOR_BLOCK"]
