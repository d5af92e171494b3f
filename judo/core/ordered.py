"""
Create, rename, delete and reorder ordered collections.

Controllers here are the only path through which lists and items change.
Each mutation goes to storage first and then re-reads the affected
collection; the in-memory order is never guessed locally. The reloaded
snapshot and the repaired selection index are computed in full before either
is assigned, so a failed storage call leaves the previous view untouched.
"""

from __future__ import annotations

import logging
from typing import Generic, List, Optional, Sequence, TypeVar

from judo.core import selection
from judo.core.models import Direction, ListsComponent, TodoItem, UIList
from judo.core.selection import SelectionOp
from judo.core.storage import Database

logger = logging.getLogger(__name__)

E = TypeVar("E")


class OrderedCollectionController(Generic[E]):
    """Shared create/rename/delete/move discipline for one ordered collection.

    Subclasses bind the controller to where the collection and its selection
    live, and to the storage calls for their entity kind.
    """

    kind = "entity"

    def __init__(self, db: Database):
        self.db = db

    # -----------------------
    # Hooks
    # -----------------------
    def entries(self) -> Sequence[E]:
        raise NotImplementedError

    def selected(self) -> Optional[int]:
        raise NotImplementedError

    def _commit(self, entries: List[E], selected: Optional[int]) -> None:
        raise NotImplementedError

    def _load(self) -> List[E]:
        raise NotImplementedError

    def _entity_id(self, entry: E) -> int:
        raise NotImplementedError

    def _persist_create(self, name: str) -> int:
        raise NotImplementedError

    def _persist_rename(self, entity_id: int, name: str) -> None:
        raise NotImplementedError

    def _persist_delete(self, entity_id: int) -> None:
        raise NotImplementedError

    def _persist_reposition(self, entity_id: int, direction: Direction) -> None:
        raise NotImplementedError

    # -----------------------
    # Operations
    # -----------------------
    def _selected_entry(self) -> Optional[E]:
        i = self.selected()
        entries = self.entries()
        if i is None or not (0 <= i < len(entries)):
            return None
        return entries[i]

    def reload(self) -> None:
        """Re-read the collection, keeping the selection where still valid."""
        old = self.selected()
        fresh = self._load()
        self._commit(fresh, selection.after_refresh(old, len(fresh)))

    def create(self, name: str) -> None:
        """Append a new entity. The selection does not move to it."""
        old = self.selected()
        new_id = self._persist_create(name)
        logger.debug(f"Created {self.kind} {new_id}")
        fresh = self._load()
        self._commit(fresh, selection.after_refresh(old, len(fresh)))

    def rename(self, name: str) -> None:
        entry = self._selected_entry()
        if entry is None:
            return
        i = self.selected()
        self._persist_rename(self._entity_id(entry), name)
        fresh = self._load()
        self._commit(fresh, selection.after_refresh(i, len(fresh)))

    def delete(self) -> None:
        entry = self._selected_entry()
        if entry is None:
            return
        i = self.selected()
        self._persist_delete(self._entity_id(entry))
        logger.debug(f"Deleted {self.kind} {self._entity_id(entry)}")
        fresh = self._load()
        self._commit(fresh, selection.after_delete(i, len(fresh)))

    def _move(self, direction: Direction) -> None:
        entry = self._selected_entry()
        if entry is None:
            return
        i = self.selected()
        n = len(self.entries())
        if direction is Direction.UP and i == 0:
            return
        if direction is Direction.DOWN and i + 1 >= n:
            return
        self._persist_reposition(self._entity_id(entry), direction)
        fresh = self._load()
        op = SelectionOp.MOVE_UP if direction is Direction.UP else SelectionOp.MOVE_DOWN
        self._commit(fresh, selection.repair(i, n, len(fresh), op))

    def move_up(self) -> None:
        self._move(Direction.UP)

    def move_down(self) -> None:
        self._move(Direction.DOWN)

    # Selection-only changes (no storage involved)
    def _reselect(self, op: SelectionOp) -> None:
        entries = list(self.entries())
        n = len(entries)
        self._commit(entries, selection.repair(self.selected(), n, n, op))

    def select_next(self) -> None:
        self._reselect(SelectionOp.SELECT_NEXT)

    def select_previous(self) -> None:
        self._reselect(SelectionOp.SELECT_PREVIOUS)

    def select_first(self) -> None:
        self._reselect(SelectionOp.SELECT_FIRST)

    def deselect(self) -> None:
        self._reselect(SelectionOp.DESELECT)


class ListsController(OrderedCollectionController[UIList]):
    """Lists of the connected database (global scope)."""

    kind = "list"

    def __init__(self, component: ListsComponent, db: Database):
        super().__init__(db)
        self.component = component

    def entries(self) -> Sequence[UIList]:
        return self.component.lists

    def selected(self) -> Optional[int]:
        return self.component.list_state

    def _commit(self, entries: List[UIList], selected: Optional[int]) -> None:
        self.component.lists = entries
        self.component.list_state = selected

    def _entity_id(self, entry: UIList) -> int:
        return entry.list.id

    def _load(self) -> List[UIList]:
        # Item selections survive a list reload for lists that still exist.
        previous = {ui.list.id: ui.item_state for ui in self.component.lists}
        fresh: List[UIList] = []
        for lst, items in self.db.list_load_all():
            state = selection.after_refresh(previous.get(lst.id), len(items))
            fresh.append(UIList(list=lst, items=list(items), item_state=state))
        return fresh

    def _persist_create(self, name: str) -> int:
        return self.db.list_create(name)

    def _persist_rename(self, entity_id: int, name: str) -> None:
        self.db.list_rename(entity_id, name)

    def _persist_delete(self, entity_id: int) -> None:
        self.db.list_delete(entity_id)

    def _persist_reposition(self, entity_id: int, direction: Direction) -> None:
        self.db.list_reposition(entity_id, direction)


class ItemsController(OrderedCollectionController[TodoItem]):
    """Items of one list (scoped by the list id)."""

    kind = "item"

    def __init__(self, ui_list: UIList, db: Database):
        super().__init__(db)
        self.ui_list = ui_list

    def entries(self) -> Sequence[TodoItem]:
        return self.ui_list.items

    def selected(self) -> Optional[int]:
        return self.ui_list.item_state

    def _commit(self, entries: List[TodoItem], selected: Optional[int]) -> None:
        self.ui_list.items = entries
        self.ui_list.item_state = selected

    def _entity_id(self, entry: TodoItem) -> int:
        return entry.id

    def _load(self) -> List[TodoItem]:
        return list(self.db.items_for_list(self.ui_list.list.id))

    def _persist_create(self, name: str) -> int:
        return self.db.item_create(self.ui_list.list.id, name)

    def _persist_rename(self, entity_id: int, name: str) -> None:
        self.db.item_rename(entity_id, name)

    def _persist_delete(self, entity_id: int) -> None:
        self.db.item_delete(entity_id)

    def _persist_reposition(self, entity_id: int, direction: Direction) -> None:
        self.db.item_reposition(entity_id, direction)

    def toggle_done(self) -> None:
        """Flip the done flag of the selected item and refresh only that item."""
        entry = self._selected_entry()
        if entry is None:
            return
        i = self.selected()
        self.db.item_toggle_done(entry.id)
        refreshed = self.db.item_get(entry.id)
        items = list(self.ui_list.items)
        items[i] = refreshed
        self._commit(items, i)


__all__ = ["OrderedCollectionController", "ListsController", "ItemsController"]
