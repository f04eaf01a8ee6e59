"""Configuration CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from .core import app, console

config_app = typer.Typer(help="Inspect and initialise configuration")
app.add_typer(config_app, name="config")


@config_app.command("path")
def config_path_cmd() -> None:
    """Show config file location."""
    from declutter.config.loader import get_config_path

    console.print(get_config_path())


@config_app.command("show")
def config_show(
    path: Path = typer.Option(None, "--config", "-c", help="Config file (default ~/.declutter/config.json)"),
) -> None:
    """Show the effective filter settings."""
    from declutter.config.loader import load_config
    from declutter.engine.eviction import eviction_interval

    config = load_config(path)
    settings = config.filter

    table = Table(title="Filter settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))
    table.add_row("eviction_interval_seconds", str(eviction_interval(settings.cache_ttl_seconds)))

    console.print(table)


@config_app.command("init")
def config_init(
    path: Path = typer.Option(None, "--config", "-c", help="Config file (default ~/.declutter/config.json)"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a config file with default settings."""
    from declutter.config.loader import get_config_path, save_config
    from declutter.config.schema import Config

    target = path or get_config_path()
    if target.exists() and not force:
        console.print(f"[yellow]Config already exists at {target}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config(), target)
    console.print(f"[green]✓[/green] Created config at {target}")
