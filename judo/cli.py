#!/usr/bin/env python3
"""
Judo - ordered to-do lists in the terminal
Main CLI entry point
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from judo.commands import config_cmd, db_cmd, tui_cmd

app = typer.Typer(
    name="judo",
    help="Keyboard-driven to-do lists backed by SQLite",
    no_args_is_help=False,
    add_completion=True,
)

app.command(name="tui", help="Launch the full-screen TUI (default)")(tui_cmd.tui)

app.add_typer(db_cmd.app, name="db", help="Manage the database registry")
app.add_typer(config_cmd.app, name="config", help="Inspect the configuration file")


def _configure_logging(log_file: Optional[Path], verbose: bool) -> None:
    # The terminal belongs to the TUI; records only go to a file when asked.
    if log_file is None:
        logging.getLogger("judo").addHandler(logging.NullHandler())
        return
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_file),
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Path to judo.yaml"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Write log records to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug records"),
) -> None:
    """
    Judo - ordered to-do lists in the terminal

    Run without a command to open the TUI.
    """
    _configure_logging(log_file, verbose)
    ctx.obj = {"config_path": config}
    if ctx.invoked_subcommand is None:
        tui_cmd.tui(ctx)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
