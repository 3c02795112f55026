"""Settings command group: inspect or reset a mode's persisted settings."""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.table import Table

from modebridge.config.loader import load_config
from modebridge.settings.backends import create_backend
from modebridge.settings.store import SettingsStore


def _store(name: str) -> SettingsStore:
    config = load_config()
    backend = create_backend(config.storage.backend, config.storage.directory_path)
    return SettingsStore(backend, name)


def register_settings_commands(app: typer.Typer, console: Console) -> None:
    """Register the settings command group."""
    settings_app = typer.Typer(help="Inspect or reset a mode's stored settings")
    app.add_typer(settings_app, name="settings")

    @settings_app.command("show")
    def settings_show(
        name: str = typer.Argument(..., help="Mode name (robopaint.name), or 'robopaint' for the app"),
        as_json: bool = typer.Option(False, "--json", help="Print the raw document"),
    ) -> None:
        store = _store(name)
        values = store.load()
        if as_json:
            typer.echo(json.dumps(values, indent=2, ensure_ascii=False))
            return
        if not values:
            console.print(f"[yellow]No settings stored for {name}[/yellow]")
            return
        table = Table(title=f"{store.key} ({len(values)})")
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        for key in sorted(values):
            table.add_row(key, json.dumps(values[key], ensure_ascii=False))
        console.print(table)

    @settings_app.command("clear")
    def settings_clear(
        name: str = typer.Argument(..., help="Mode name (robopaint.name)"),
        yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    ) -> None:
        store = _store(name)
        if not yes and not typer.confirm(f"Delete all stored settings for {name}?"):
            console.print("Cancelled.")
            raise typer.Exit(1)
        store.clear()
        console.print(f"[green]✓[/green] Cleared {store.key}")
