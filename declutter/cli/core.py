"""Shared CLI application context."""

from __future__ import annotations

import typer
from rich.console import Console

from declutter import __logo__, __version__

app = typer.Typer(
    name="declutter",
    help=f"{__logo__} declutter - repeated-message filter for chat streams",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} declutter v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
    """declutter - repeated-message filter for chat streams."""
