"""
SQLite persistence for lists and items.

Positions are dense and 0-based within their scope (all lists globally, the
items of one list per list). Every write keeps them dense: creation appends
after the current maximum, deletion closes the gap, repositioning swaps with
the adjacent neighbour. Each write runs inside a single transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from judo.core.models import Direction, TodoItem, TodoList

logger = logging.getLogger(__name__)

SQLITE_PREFIX = "sqlite:"
MEMORY = ":memory:"

_MIGRATIONS = (
    """
    CREATE TABLE IF NOT EXISTS todo_lists (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        position INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS todo_items (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        list_id INTEGER NOT NULL REFERENCES todo_lists(id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        is_done INTEGER NOT NULL DEFAULT 0,
        position INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_todo_items_list ON todo_items(list_id, position)",
)


class StorageError(RuntimeError):
    """A persistence call failed (unreachable file, rejected write, missing row)."""


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def connection_path(connection_str: str) -> str:
    """
    Extract the filesystem path from a connection string.

    Accepts "sqlite:<path>", "sqlite://<path>" or a bare path.

    Examples:
        >>> connection_path("sqlite:/tmp/judo.db")
        '/tmp/judo.db'
        >>> connection_path("sqlite::memory:")
        ':memory:'
    """
    s = (connection_str or "").strip()
    if s.startswith(SQLITE_PREFIX):
        s = s[len(SQLITE_PREFIX):]
        if s.startswith("//"):
            s = s[2:]
    if not s:
        raise StorageError(f"Invalid connection string: {connection_str!r}")
    return s


@contextmanager
def _guard(op: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as e:
        logger.warning(f"Storage operation '{op}' failed: {e}")
        raise StorageError(f"{op} failed: {e}") from e


class Database:
    """A connection to one judo database file."""

    def __init__(self, conn: sqlite3.Connection, connection_str: str):
        self._conn = conn
        self.connection_str = connection_str

    @classmethod
    def connect(cls, connection_str: str) -> "Database":
        """
        Open (creating if needed) a database and run migrations.

        Raises:
            StorageError: If the file cannot be opened or migrated
        """
        path = connection_path(connection_str)
        if path != MEMORY:
            try:
                Path(path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create directory for {path}: {e}") from e
            path = str(Path(path).expanduser())
        with _guard("connect"):
            conn = sqlite3.connect(path)
            try:
                conn.execute("PRAGMA foreign_keys = ON")
                with conn:
                    for stmt in _MIGRATIONS:
                        conn.execute(stmt)
            except sqlite3.Error:
                conn.close()
                raise
        logger.debug(f"Connected to {path}")
        return cls(conn, connection_str)

    def close(self) -> None:
        try:
            self._conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Closing {self.connection_str} failed: {e}")

    # -----------------------
    # Shared positional helpers
    # -----------------------
    def _next_position(self, table: str, scope_sql: str, params: tuple) -> int:
        row = self._conn.execute(
            f"SELECT COALESCE(MAX(position), -1) + 1 FROM {table} WHERE {scope_sql}",
            params,
        ).fetchone()
        return int(row[0])

    def _swap(
        self,
        table: str,
        entity_id: int,
        direction: Direction,
        scope_col: Optional[str],
    ) -> bool:
        """Swap an entity with its neighbour; False when already at the boundary."""
        cols = "id, position" + (f", {scope_col}" if scope_col else "")
        row = self._conn.execute(f"SELECT {cols} FROM {table} WHERE id = ?", (entity_id,)).fetchone()
        if row is None:
            raise StorageError(f"No row {entity_id} in {table}")
        position = int(row[1])
        scope_sql, scope_params = ("1 = 1", ())
        if scope_col:
            scope_sql, scope_params = (f"{scope_col} = ?", (row[2],))

        if direction is Direction.UP:
            neighbour = self._conn.execute(
                f"SELECT id, position FROM {table} WHERE {scope_sql} AND position < ? "
                "ORDER BY position DESC LIMIT 1",
                scope_params + (position,),
            ).fetchone()
        else:
            neighbour = self._conn.execute(
                f"SELECT id, position FROM {table} WHERE {scope_sql} AND position > ? "
                "ORDER BY position ASC LIMIT 1",
                scope_params + (position,),
            ).fetchone()
        if neighbour is None:
            return False

        now = _now_iso()
        self._conn.execute(
            f"UPDATE {table} SET position = ?, updated_at = ? WHERE id = ?",
            (int(neighbour[1]), now, entity_id),
        )
        self._conn.execute(
            f"UPDATE {table} SET position = ?, updated_at = ? WHERE id = ?",
            (position, now, int(neighbour[0])),
        )
        return True

    def _delete_and_compact(self, table: str, entity_id: int, scope_col: Optional[str]) -> None:
        cols = "position" + (f", {scope_col}" if scope_col else "")
        row = self._conn.execute(f"SELECT {cols} FROM {table} WHERE id = ?", (entity_id,)).fetchone()
        if row is None:
            raise StorageError(f"No row {entity_id} in {table}")
        self._conn.execute(f"DELETE FROM {table} WHERE id = ?", (entity_id,))
        if scope_col:
            self._conn.execute(
                f"UPDATE {table} SET position = position - 1 WHERE {scope_col} = ? AND position > ?",
                (row[1], int(row[0])),
            )
        else:
            self._conn.execute(
                f"UPDATE {table} SET position = position - 1 WHERE position > ?",
                (int(row[0]),),
            )

    # -----------------------
    # Lists
    # -----------------------
    def list_create(self, name: str) -> int:
        with _guard("list_create"), self._conn:
            now = _now_iso()
            position = self._next_position("todo_lists", "1 = 1", ())
            cur = self._conn.execute(
                "INSERT INTO todo_lists (name, position, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (name, position, now, now),
            )
            return int(cur.lastrowid)

    def list_rename(self, list_id: int, name: str) -> None:
        with _guard("list_rename"), self._conn:
            cur = self._conn.execute(
                "UPDATE todo_lists SET name = ?, updated_at = ? WHERE id = ?",
                (name, _now_iso(), list_id),
            )
            if cur.rowcount == 0:
                raise StorageError(f"No list with id {list_id}")

    def list_delete(self, list_id: int) -> None:
        with _guard("list_delete"), self._conn:
            self._delete_and_compact("todo_lists", list_id, None)

    def list_reposition(self, list_id: int, direction: Direction) -> bool:
        with _guard("list_reposition"), self._conn:
            return self._swap("todo_lists", list_id, Direction(direction), None)

    def lists(self) -> List[TodoList]:
        with _guard("lists"):
            rows = self._conn.execute(
                "SELECT id, name, position FROM todo_lists ORDER BY position, id"
            ).fetchall()
        return [TodoList(id=int(r[0]), name=str(r[1]), position=int(r[2])) for r in rows]

    def list_load_all(self) -> List[Tuple[TodoList, List[TodoItem]]]:
        """Every list in order, each paired with its ordered items."""
        return [(lst, self.items_for_list(lst.id)) for lst in self.lists()]

    # -----------------------
    # Items
    # -----------------------
    def item_create(self, list_id: int, name: str) -> int:
        with _guard("item_create"), self._conn:
            now = _now_iso()
            position = self._next_position("todo_items", "list_id = ?", (list_id,))
            cur = self._conn.execute(
                "INSERT INTO todo_items (list_id, name, is_done, position, created_at, updated_at) "
                "VALUES (?, ?, 0, ?, ?, ?)",
                (list_id, name, position, now, now),
            )
            return int(cur.lastrowid)

    def item_rename(self, item_id: int, name: str) -> None:
        with _guard("item_rename"), self._conn:
            cur = self._conn.execute(
                "UPDATE todo_items SET name = ?, updated_at = ? WHERE id = ?",
                (name, _now_iso(), item_id),
            )
            if cur.rowcount == 0:
                raise StorageError(f"No item with id {item_id}")

    def item_delete(self, item_id: int) -> None:
        with _guard("item_delete"), self._conn:
            self._delete_and_compact("todo_items", item_id, "list_id")

    def item_reposition(self, item_id: int, direction: Direction) -> bool:
        with _guard("item_reposition"), self._conn:
            return self._swap("todo_items", item_id, Direction(direction), "list_id")

    def item_toggle_done(self, item_id: int) -> None:
        with _guard("item_toggle_done"), self._conn:
            cur = self._conn.execute(
                "UPDATE todo_items SET is_done = 1 - is_done, updated_at = ? WHERE id = ?",
                (_now_iso(), item_id),
            )
            if cur.rowcount == 0:
                raise StorageError(f"No item with id {item_id}")

    def item_get(self, item_id: int) -> TodoItem:
        with _guard("item_get"):
            row = self._conn.execute(
                "SELECT id, list_id, name, position, is_done FROM todo_items WHERE id = ?",
                (item_id,),
            ).fetchone()
        if row is None:
            raise StorageError(f"No item with id {item_id}")
        return _item_from_row(row)

    def items_for_list(self, list_id: int) -> List[TodoItem]:
        with _guard("items_for_list"):
            rows = self._conn.execute(
                "SELECT id, list_id, name, position, is_done FROM todo_items "
                "WHERE list_id = ? ORDER BY position, id",
                (list_id,),
            ).fetchall()
        return [_item_from_row(r) for r in rows]


def _item_from_row(row) -> TodoItem:
    return TodoItem(
        id=int(row[0]),
        list_id=int(row[1]),
        name=str(row[2]),
        position=int(row[3]),
        is_done=bool(row[4]),
    )


__all__ = ["Database", "StorageError", "connection_path", "SQLITE_PREFIX"]
