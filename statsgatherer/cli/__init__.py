"""Statsgatherer CLI — operator tooling built on Typer + Rich."""

from statsgatherer.cli.app import app

__all__ = ["app"]
