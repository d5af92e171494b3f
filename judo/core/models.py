"""Data models for lists, items and their in-memory views."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Direction(str, Enum):
    """Which neighbour an entity swaps positions with."""

    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class TodoList:
    id: int
    name: str
    position: int


@dataclass(frozen=True)
class TodoItem:
    id: int
    list_id: int
    name: str
    position: int
    is_done: bool = False


@dataclass
class UIList:
    """A list together with its ordered items and the item selection."""

    list: TodoList
    items: List[TodoItem] = field(default_factory=list)
    item_state: Optional[int] = None

    def selected_item(self) -> Optional[TodoItem]:
        if self.item_state is None or not (0 <= self.item_state < len(self.items)):
            return None
        return self.items[self.item_state]


@dataclass
class ListsComponent:
    """All lists of the connected database plus the list selection."""

    lists: List[UIList] = field(default_factory=list)
    list_state: Optional[int] = None

    def selected(self) -> Optional[int]:
        return self.list_state

    def get_selected_list(self) -> Optional[UIList]:
        if self.list_state is None or not (0 <= self.list_state < len(self.lists)):
            return None
        return self.lists[self.list_state]

    def names(self) -> List[str]:
        return [ui.list.name for ui in self.lists]


__all__ = ["Direction", "TodoList", "TodoItem", "UIList", "ListsComponent"]
