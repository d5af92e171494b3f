"""Database registry commands for judo CLI."""

import typer
from rich.console import Console
from rich.table import Table

from judo.commands.common import config_path_from, load_config_or_exit
from judo.core.config import ConfigError, DBConfig, db_connection_str, validate_db_name
from judo.core.storage import Database, StorageError

app = typer.Typer()
console = Console()


@app.command("list")
def list_dbs(ctx: typer.Context):
    """List configured databases."""
    cfg = load_config_or_exit(config_path_from(ctx))
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Default", justify="center")
    table.add_column("Name")
    table.add_column("Connection", style="dim")
    for db in cfg.list_dbs():
        table.add_row("✓" if db.name == cfg.default else "", db.name, db.connection_str)
    console.print(table)


@app.command("add")
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Database name"),
    default: bool = typer.Option(False, "--default", help="Make it the default database"),
):
    """Create a new database and register it."""
    ok, err = validate_db_name(name)
    if not ok:
        console.print(f"[bold red]❌ Error:[/] {err}")
        raise typer.Exit(1)
    name = name.strip()

    cfg = load_config_or_exit(config_path_from(ctx))
    descriptor = DBConfig(name=name, connection_str=db_connection_str(name))
    try:
        if cfg.get_by_name(name) is not None:
            raise ConfigError(f"A database named '{name}' already exists")
        Database.connect(descriptor.connection_str).close()
        cfg.add_db(descriptor)
        if default:
            cfg.set_default(name)
        cfg.write()
    except (ConfigError, StorageError) as e:
        console.print(f"[bold red]❌ Error:[/] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✔[/] Added database [cyan]{name}[/]")


@app.command("set-default")
def set_default(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Database name"),
):
    """Set the database opened at startup."""
    cfg = load_config_or_exit(config_path_from(ctx))
    try:
        cfg.set_default(name)
        cfg.write()
    except ConfigError as e:
        console.print(f"[bold red]❌ Error:[/] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✔[/] Default database is now [cyan]{name}[/]")
