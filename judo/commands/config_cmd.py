"""Config command for judo CLI."""

import typer
import yaml
from rich.console import Console

from judo.commands.common import config_path_from, load_config_or_exit
from judo.core.config import default_config_path

app = typer.Typer()
console = Console()


@app.command("path")
def path(ctx: typer.Context):
    """Print the configuration file location."""
    p = config_path_from(ctx) or default_config_path()
    console.print(str(p), soft_wrap=True, highlight=False)


@app.command("show")
def show(ctx: typer.Context):
    """Show the current configuration."""
    cfg = load_config_or_exit(config_path_from(ctx))
    console.print(f"\n[bold]Configuration:[/] [underline]{cfg.path}[/]")
    console.print(f"  Default database: [cyan]{cfg.default}[/]")
    console.print(f"  Databases: [cyan]{len(cfg.dbs)}[/]")
    console.print()
    console.print(yaml.safe_dump(cfg.to_dict(), sort_keys=False, allow_unicode=True), highlight=False, markup=False)
