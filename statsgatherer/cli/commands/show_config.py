"""``statsgatherer show-config`` — print the effective configuration."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from statsgatherer.config import GathererConfig
from statsgatherer.routing.factory import create_sinks

console = Console()


def show_config_cmd() -> None:
    """Show settings (env + .env resolved) and the sinks they produce."""
    cfg = GathererConfig()

    table = Table(title="Statsgatherer configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in cfg.model_dump().items():
        table.add_row(name, str(value))
    console.print(table)

    sinks = create_sinks(cfg)
    if not sinks:
        console.print("[yellow]No sinks enabled.[/yellow]")
        return
    sink_table = Table(title="Sinks (attempt order)")
    sink_table.add_column("#", justify="right")
    sink_table.add_column("Sink", style="cyan")
    sink_table.add_column("Target")
    for idx, sink in enumerate(sinks, start=1):
        sink_table.add_row(str(idx), sink.sink_name, sink.target)
    console.print(sink_table)
