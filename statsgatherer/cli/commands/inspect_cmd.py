"""``statsgatherer inspect`` — run the disabled-flag inspection on a file."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from statsgatherer.core.config_inspector import ConfigInspectionError, inspect_config

console = Console()


def inspect_cmd(
    config_file: Path = typer.Argument(..., help="Path to an item config.xml."),
    strict: bool = typer.Option(
        False, "--strict", help="Exit non-zero on parse errors instead of failing open."
    ),
) -> None:
    """Print DISABLED or ACTIVE for the given configuration file."""
    try:
        raw = config_file.read_text(encoding="utf-8")
    except OSError as exc:
        console.print(f"[red]Cannot read {config_file}:[/red] {exc}")
        raise typer.Exit(code=2)

    try:
        disabled = inspect_config(raw)
    except ConfigInspectionError as exc:
        if strict:
            console.print(f"[red]Inspection failed:[/red] {exc}")
            raise typer.Exit(code=1)
        console.print(f"[yellow]Inspection failed, assuming active:[/yellow] {exc}")
        disabled = False

    if disabled:
        console.print("[red]DISABLED[/red]")
    else:
        console.print("[green]ACTIVE[/green]")
