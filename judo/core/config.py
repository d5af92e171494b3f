"""
Configuration for judo: the database registry and the colour theme.

The file is YAML and lives in the user's config directory:

    default: dojo
    dbs:
      - name: dojo
        connection_str: sqlite:/home/me/.local/share/judo/judo.db
    colours:
      background: "#002626"
      foreground: "#FCF1D5"
      highlight: "#FFA69E"

A missing file is created with a single default database. A missing
`colours` block falls back to the default theme.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from judo.core.storage import SQLITE_PREFIX

logger = logging.getLogger(__name__)

APP_NAME = "judo"
CONFIG_FILE = "judo.yaml"

DEFAULT_DB_NAME = "dojo"
DEFAULT_DB_FILE = "judo.db"

DEFAULT_FG_COLOUR = "#FCF1D5"
DEFAULT_HL_COLOUR = "#FFA69E"
DEFAULT_BG_COLOUR = "#002626"


class ConfigError(RuntimeError):
    """The configuration could not be read, validated or written."""


def _user_config_dir() -> Path:
    """
    Return an OS-appropriate config directory for judo.

    - JUDO_CONFIG_DIR wins when set
    - macOS: ~/Library/Application Support/judo/
    - Windows: %APPDATA%\\judo\\
    - Linux/Unix: $XDG_CONFIG_HOME/judo/ or ~/.config/judo/
    """
    override = os.environ.get("JUDO_CONFIG_DIR")
    if override:
        return Path(override).expanduser()

    home = Path.home()
    plat = sys.platform.lower()
    if plat == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    if plat.startswith("win"):
        appdata = os.environ.get("APPDATA")
        return (Path(appdata) if appdata else home) / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else (home / ".config")
    return base / APP_NAME


def _user_data_dir() -> Path:
    """Directory holding the database files (JUDO_DATA_DIR overrides)."""
    override = os.environ.get("JUDO_DATA_DIR")
    if override:
        return Path(override).expanduser()

    home = Path.home()
    plat = sys.platform.lower()
    if plat == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    if plat.startswith("win"):
        appdata = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        return (Path(appdata) if appdata else home) / APP_NAME

    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg) if xdg else (home / ".local" / "share")
    return base / APP_NAME


def default_config_path() -> Path:
    return _user_config_dir() / CONFIG_FILE


def db_connection_str(db_name: str) -> str:
    """Connection string for a database file named after `db_name` in the data dir."""
    return f"{SQLITE_PREFIX}{_user_data_dir() / f'{db_name}.db'}"


def validate_db_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a database name; it becomes part of a file name.

    Returns:
        (is_valid, error_message) - error_message is None if valid
    """
    if not name or not name.strip():
        return False, "Database name cannot be empty"

    name = name.strip()
    if name.startswith("."):
        return False, "Database name cannot start with a dot"
    if ".." in name:
        return False, "Database name cannot contain '..'"
    if "/" in name or "\\" in name:
        return False, "Database name cannot contain path separators (/ or \\)"
    m = re.search(r'[<>:"|?*]', name)
    if m:
        return False, f"Database name cannot contain '{m.group(0)}'"
    return True, None


@dataclass
class Theme:
    background: str = DEFAULT_BG_COLOUR
    foreground: str = DEFAULT_FG_COLOUR
    highlight: str = DEFAULT_HL_COLOUR

    def to_dict(self) -> Dict[str, str]:
        return {
            "background": self.background,
            "foreground": self.foreground,
            "highlight": self.highlight,
        }

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> "Theme":
        d = d or {}
        return Theme(
            background=str(d.get("background") or DEFAULT_BG_COLOUR),
            foreground=str(d.get("foreground") or DEFAULT_FG_COLOUR),
            highlight=str(d.get("highlight") or DEFAULT_HL_COLOUR),
        )


@dataclass(frozen=True)
class DBConfig:
    """A named database descriptor."""

    name: str
    connection_str: str

    @staticmethod
    def default() -> "DBConfig":
        return DBConfig(
            name=DEFAULT_DB_NAME,
            connection_str=f"{SQLITE_PREFIX}{_user_data_dir() / DEFAULT_DB_FILE}",
        )


@dataclass
class Config:
    default: str = DEFAULT_DB_NAME
    dbs: List[DBConfig] = field(default_factory=lambda: [DBConfig.default()])
    colours: Theme = field(default_factory=Theme)
    # Where this config was read from; writes go back there.
    path: Optional[Path] = None

    # -----------------------
    # Serialization
    # -----------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "default": self.default,
            "dbs": [{"name": db.name, "connection_str": db.connection_str} for db in self.dbs],
            "colours": self.colours.to_dict(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Config":
        if not isinstance(d, dict):
            raise ConfigError("Config root must be a mapping")
        default = d.get("default")
        if not default:
            raise ConfigError("Config is missing 'default'")
        raw_dbs = d.get("dbs")
        if not isinstance(raw_dbs, list):
            raise ConfigError("Config 'dbs' must be a list")
        dbs: List[DBConfig] = []
        for entry in raw_dbs:
            if not isinstance(entry, dict) or not entry.get("name") or not entry.get("connection_str"):
                raise ConfigError(f"Invalid database entry: {entry!r}")
            dbs.append(DBConfig(name=str(entry["name"]), connection_str=str(entry["connection_str"])))
        return Config(default=str(default), dbs=dbs, colours=Theme.from_dict(d.get("colours")))

    @classmethod
    def read(cls, path: Optional[Path] = None) -> "Config":
        """
        Read the config file, creating a default one if it does not exist.

        Raises:
            ConfigError: If the file exists but cannot be read or parsed
        """
        p = Path(path) if path is not None else default_config_path()
        if not p.exists():
            cfg = cls()
            cfg.path = p
            cfg.write(p)
            logger.info(f"Created default config at {p}")
            return cfg
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            raise ConfigError(f"Could not load config {p}: {e}") from e
        cfg = cls.from_dict(data)
        cfg.path = p
        return cfg

    def write(self, path: Optional[Path] = None) -> None:
        """
        Write the config as YAML.

        Raises:
            ConfigError: If the file cannot be written
        """
        p = Path(path) if path is not None else (self.path or default_config_path())
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            with open(p, "w", encoding="utf-8") as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        except OSError as e:
            raise ConfigError(f"Failed to save config to {p}: {e}") from e
        self.path = p

    # -----------------------
    # Theme accessors
    # -----------------------
    def foreground(self) -> str:
        return self.colours.foreground

    def highlight(self) -> str:
        return self.colours.highlight

    def background(self) -> str:
        return self.colours.background

    # -----------------------
    # Registry
    # -----------------------
    def list_dbs(self) -> List[DBConfig]:
        return list(self.dbs)

    def get_by_name(self, name: str) -> Optional[DBConfig]:
        for db in self.dbs:
            if db.name == name:
                return db
        return None

    def index_of(self, name: str) -> Optional[int]:
        for i, db in enumerate(self.dbs):
            if db.name == name:
                return i
        return None

    def get_default(self) -> DBConfig:
        """
        Descriptor of the default database.

        Raises:
            ConfigError: If no descriptor, or more than one, carries the default name
        """
        matching = [db for db in self.dbs if db.name == self.default]
        if not matching:
            raise ConfigError(f"Default database '{self.default}' not found")
        if len(matching) > 1:
            raise ConfigError(f"Multiple databases with name '{self.default}' found")
        return matching[0]

    def add_db(self, db: DBConfig) -> None:
        if self.get_by_name(db.name) is not None:
            raise ConfigError(f"A database named '{db.name}' already exists")
        self.dbs.append(db)

    def set_default(self, name: str) -> None:
        if self.get_by_name(name) is None:
            raise ConfigError(f"Unknown database '{name}'")
        self.default = name


__all__ = [
    "Config",
    "ConfigError",
    "DBConfig",
    "Theme",
    "default_config_path",
    "db_connection_str",
    "validate_db_name",
]
