"""
Textual full-screen TUI entrypoint.
"""

from __future__ import annotations

import typer
from rich.console import Console

from judo.commands.common import config_path_from, load_config_or_exit
from judo.core.config import ConfigError
from judo.core.storage import StorageError

console = Console(stderr=True)


def tui(ctx: typer.Context) -> None:
    """Launch the judo TUI on the default database."""
    try:
        from judo.tui.app import JudoTuiApp
    except ImportError as e:  # pragma: no cover
        console.print(f"[bold red]❌ TUI dependencies are missing:[/] {e}")
        raise typer.Exit(1)

    cfg = load_config_or_exit(config_path_from(ctx))
    try:
        app = JudoTuiApp.from_config(cfg)
    except (ConfigError, StorageError) as e:
        console.print(f"[bold red]❌ Cannot start judo:[/] {e}")
        raise typer.Exit(1)
    app.run()
