from __future__ import annotations

from pathlib import Path

import pytest

from judo.core.models import Direction
from judo.core.storage import Database, StorageError, connection_path

from conftest import seed


def _names(db: Database) -> list[str]:
    return [lst.name for lst in db.lists()]


def _positions_are_dense(rows) -> bool:
    return [r.position for r in rows] == list(range(len(rows)))


def test_connection_path_variants() -> None:
    assert connection_path("sqlite:/tmp/a.db") == "/tmp/a.db"
    assert connection_path("sqlite:///tmp/a.db") == "/tmp/a.db"
    assert connection_path("/tmp/a.db") == "/tmp/a.db"
    assert connection_path("sqlite::memory:") == ":memory:"
    with pytest.raises(StorageError):
        connection_path("sqlite:")


def test_connect_creates_file_and_parent_dirs(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "x.db"
    d = Database.connect(f"sqlite:{target}")
    d.close()
    assert target.exists()


def test_connect_to_directory_fails(tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        Database.connect(f"sqlite:{tmp_path}")


def test_create_appends_in_order(db: Database) -> None:
    seed(db, {"a": [], "b": [], "c": []})
    assert _names(db) == ["a", "b", "c"]
    assert _positions_are_dense(db.lists())


def test_delete_list_closes_gap_and_cascades(db: Database) -> None:
    seed(db, {"a": ["x"], "b": ["y", "z"], "c": []})
    b = db.lists()[1]
    db.list_delete(b.id)
    assert _names(db) == ["a", "c"]
    assert _positions_are_dense(db.lists())
    assert db.items_for_list(b.id) == []


def test_reposition_lists(db: Database) -> None:
    seed(db, {"a": [], "b": [], "c": []})
    c = db.lists()[2]
    assert db.list_reposition(c.id, Direction.UP) is True
    assert _names(db) == ["a", "c", "b"]
    a = db.lists()[0]
    assert db.list_reposition(a.id, Direction.UP) is False
    assert _names(db) == ["a", "c", "b"]
    assert _positions_are_dense(db.lists())


def test_item_positions_are_scoped_per_list(db: Database) -> None:
    seed(db, {"a": ["1", "2"], "b": ["3"]})
    a, b = db.lists()
    assert [i.position for i in db.items_for_list(a.id)] == [0, 1]
    assert [i.position for i in db.items_for_list(b.id)] == [0]


def test_item_delete_reposition_and_toggle(db: Database) -> None:
    seed(db, {"a": ["1", "2", "3"]})
    (a,) = db.lists()
    items = db.items_for_list(a.id)
    db.item_delete(items[0].id)
    items = db.items_for_list(a.id)
    assert [i.name for i in items] == ["2", "3"]
    assert _positions_are_dense(items)

    db.item_reposition(items[1].id, Direction.UP)
    assert [i.name for i in db.items_for_list(a.id)] == ["3", "2"]
    assert db.item_reposition(items[1].id, Direction.UP) is False

    db.item_toggle_done(items[0].id)
    assert db.item_get(items[0].id).is_done is True
    db.item_toggle_done(items[0].id)
    assert db.item_get(items[0].id).is_done is False


def test_rename_and_load_all(db: Database) -> None:
    seed(db, {"a": ["x"], "b": []})
    a = db.lists()[0]
    db.list_rename(a.id, "alpha")
    item = db.items_for_list(a.id)[0]
    db.item_rename(item.id, "ex")
    loaded = db.list_load_all()
    assert [(lst.name, [i.name for i in items]) for lst, items in loaded] == [("alpha", ["ex"]), ("b", [])]


def test_missing_rows_raise(db: Database) -> None:
    with pytest.raises(StorageError):
        db.list_rename(999, "nope")
    with pytest.raises(StorageError):
        db.item_get(999)
    with pytest.raises(StorageError):
        db.list_delete(999)


def test_closed_connection_raises_storage_error(db: Database) -> None:
    db.close()
    with pytest.raises(StorageError):
        db.lists()
