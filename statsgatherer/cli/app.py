"""Main Typer application — imports and registers all CLI commands.

Entry point: ``statsgatherer`` (configured via pyproject.toml scripts).

Commands: show-config, inspect, emit.
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from statsgatherer.cli.commands.emit import emit_cmd
from statsgatherer.cli.commands.inspect_cmd import inspect_cmd
from statsgatherer.cli.commands.show_config import show_config_cmd
from statsgatherer.config import config

app = typer.Typer(
    name="statsgatherer",
    help="Statsgatherer: item lifecycle status records for CI hosts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Override STATSGATHERER_LOG_LEVEL."
    ),
) -> None:
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=(log_level or config.log_level).upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=config.debug, show_path=False)],
    )


# Register subcommands
app.command(name="show-config", help="Show the effective configuration.")(show_config_cmd)
app.command(name="inspect", help="Report whether a config file marks its item disabled.")(inspect_cmd)
app.command(name="emit", help="Build a status record for a local item and dispatch it.")(emit_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
