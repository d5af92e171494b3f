from __future__ import annotations

from pathlib import Path

import pytest

from judo.core.config import Config, DBConfig
from judo.core.storage import Database


@pytest.fixture(autouse=True)
def judo_dirs(tmp_path: Path, monkeypatch) -> Path:
    """Keep every config/data write inside tmp_path."""
    monkeypatch.setenv("JUDO_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("JUDO_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("JUDO_TUI_DEBUG", raising=False)
    monkeypatch.delenv("JUDO_TUI_DEBUG_FILE", raising=False)
    return tmp_path


@pytest.fixture
def db() -> Database:
    d = Database.connect("sqlite::memory:")
    yield d
    d.close()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    cfg = Config(
        default="main",
        dbs=[
            DBConfig(name="main", connection_str=f"sqlite:{tmp_path / 'data' / 'main.db'}"),
            DBConfig(name="work", connection_str=f"sqlite:{tmp_path / 'data' / 'work.db'}"),
        ],
    )
    cfg.write(tmp_path / "config" / "judo.yaml")
    return cfg


def seed(db: Database, lists: dict[str, list[str]]) -> None:
    """Create lists (in order) with their items (in order)."""
    for name, items in lists.items():
        list_id = db.list_create(name)
        for item in items:
            db.item_create(list_id, item)
