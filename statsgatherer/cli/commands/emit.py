"""``statsgatherer emit`` — publish a status record for a local item.

Useful for smoke-testing sink endpoints: it runs the same listener the host
uses, against an item whose configuration is a file on disk.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from statsgatherer.config import GathererConfig
from statsgatherer.host import HostContext, LocalItem, StaticIdentity, UserRecord
from statsgatherer.listeners.item_listener import ItemStatsListener
from statsgatherer.models.records import ItemEvent

console = Console()


def emit_cmd(
    event: ItemEvent = typer.Argument(..., help="created, updated or deleted."),
    name: str = typer.Option(..., "--name", help="Item name."),
    config_file: Path = typer.Option(
        Path("config.xml"), "--config-file", help="Item configuration file."
    ),
    url: str = typer.Option(None, "--url", help="Item URL (default job/<name>/)."),
    root_url: str = typer.Option(
        "http://localhost:8080/", "--root-url", help="Host root URL."
    ),
    user: str = typer.Option(None, "--user", help="Acting user id."),
    full_name: str = typer.Option(None, "--full-name", help="Acting user's full name."),
    force: bool = typer.Option(
        False, "--force", help="Ignore the project_info_enabled flag."
    ),
) -> None:
    """Build and dispatch one status record, then print the outcome."""
    cfg = GathererConfig()
    if force:
        cfg = cfg.model_copy(update={"project_info_enabled": True})

    identity = None
    if user:
        identity = StaticIdentity(
            principal=user,
            users={user: UserRecord(user_id=user, full_name=full_name or user)},
        )
    context = HostContext(root_url=root_url, identity=identity)
    item = LocalItem(name=name, config_path=config_file, url=url)

    with ItemStatsListener(config=cfg) as listener:
        result = getattr(listener, f"on_{event.value}")(item, context)

    if result is None:
        console.print(
            "[yellow]Nothing dispatched[/yellow] (feature flag off or processing "
            "failed; see log)."
        )
        raise typer.Exit(code=1)

    table = Table(title=f"Dispatch for {result.item_name}")
    table.add_column("Sink", style="cyan")
    table.add_column("Outcome")
    for sink_name in result.succeeded:
        table.add_row(sink_name, "[green]delivered[/green]")
    for sink_name, error in result.failed.items():
        table.add_row(sink_name, f"[red]{error}[/red]")
    console.print(table)
