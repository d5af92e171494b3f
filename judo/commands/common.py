"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from judo.core.config import Config, ConfigError

err_console = Console(stderr=True)


def config_path_from(ctx: Optional[typer.Context]) -> Optional[Path]:
    """Walk up to the root context and return its --config value."""
    while ctx is not None:
        obj = ctx.obj
        if isinstance(obj, dict) and obj.get("config_path") is not None:
            return obj["config_path"]
        ctx = ctx.parent
    return None


def load_config_or_exit(path: Optional[Path]) -> Config:
    try:
        return Config.read(path)
    except ConfigError as e:
        err_console.print(f"[bold red]❌ Invalid configuration:[/] {e}")
        raise typer.Exit(1)
