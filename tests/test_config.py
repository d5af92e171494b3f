from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from judo.core.config import (
    DEFAULT_BG_COLOUR,
    Config,
    ConfigError,
    DBConfig,
    db_connection_str,
    default_config_path,
    validate_db_name,
)


def test_default_paths_follow_env(judo_dirs: Path) -> None:
    assert default_config_path() == judo_dirs / "config" / "judo.yaml"
    assert db_connection_str("work") == f"sqlite:{judo_dirs / 'data' / 'work.db'}"


def test_read_creates_default_when_missing(judo_dirs: Path) -> None:
    p = judo_dirs / "config" / "judo.yaml"
    cfg = Config.read(p)
    assert p.exists()
    assert cfg.path == p
    assert cfg.default == "dojo"
    assert cfg.get_default().connection_str == f"sqlite:{judo_dirs / 'data' / 'judo.db'}"
    assert cfg.background() == DEFAULT_BG_COLOUR


def test_roundtrip(config: Config) -> None:
    loaded = Config.read(config.path)
    assert loaded.to_dict() == config.to_dict()
    assert loaded.path == config.path


def test_missing_colours_fall_back(tmp_path: Path) -> None:
    p = tmp_path / "c.yaml"
    p.write_text(
        yaml.safe_dump({"default": "a", "dbs": [{"name": "a", "connection_str": "sqlite:/tmp/a.db"}]}),
        encoding="utf-8",
    )
    cfg = Config.read(p)
    assert cfg.colours.foreground == "#FCF1D5"


@pytest.mark.parametrize(
    "content",
    [
        "default: [unclosed",
        "",
        "default: a\ndbs: nope\n",
        "dbs:\n  - name: a\n    connection_str: sqlite:/tmp/a.db\n",
        "default: a\ndbs:\n  - name: a\n",
    ],
)
def test_invalid_files_raise_config_error(tmp_path: Path, content: str) -> None:
    p = tmp_path / "bad.yaml"
    p.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        Config.read(p)


def test_get_default_requires_exactly_one_match() -> None:
    cfg = Config(default="x", dbs=[DBConfig("a", "sqlite:/tmp/a.db")])
    with pytest.raises(ConfigError, match="not found"):
        cfg.get_default()

    cfg = Config(default="a", dbs=[DBConfig("a", "sqlite:/tmp/a.db"), DBConfig("a", "sqlite:/tmp/b.db")])
    with pytest.raises(ConfigError, match="Multiple"):
        cfg.get_default()


def test_registry_operations(config: Config) -> None:
    assert [d.name for d in config.list_dbs()] == ["main", "work"]
    assert config.index_of("work") == 1
    assert config.index_of("nope") is None

    config.add_db(DBConfig("extra", "sqlite:/tmp/extra.db"))
    with pytest.raises(ConfigError):
        config.add_db(DBConfig("extra", "sqlite:/tmp/other.db"))

    config.set_default("extra")
    assert config.get_default().name == "extra"
    with pytest.raises(ConfigError):
        config.set_default("missing")


@pytest.mark.parametrize(
    "name,ok",
    [
        ("work", True),
        ("my db", True),
        ("", False),
        ("   ", False),
        (".hidden", False),
        ("a..b", False),
        ("a/b", False),
        ("a\\b", False),
        ("a:b", False),
    ],
)
def test_validate_db_name(name: str, ok: bool) -> None:
    valid, err = validate_db_name(name)
    assert valid is ok
    assert (err is None) is ok


def test_write_failure_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(ConfigError):
        Config().write(blocker / "judo.yaml")
