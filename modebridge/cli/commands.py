"""CLI commands for modebridge.

``run`` boots a mode on stdio for its host; the other commands inspect a mode's
resources, translations and settings without a host.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console

from modebridge import __logo__, __version__
from modebridge.cli.logging_utils import configure_console_logging, ensure_rotating_log_file
from modebridge.cli.settings_command import register_settings_commands
from modebridge.config.loader import load_config
from modebridge.config.schema import Config
from modebridge.dom.document import Document
from modebridge.i18n.catalog import Catalog
from modebridge.i18n.resources import available_languages, tree_to_dict
from modebridge.i18n.translator import Translator, strategy_for
from modebridge.ipc.transport import StdioTransport, open_stdin_reader
from modebridge.mode.descriptor import ModeDescriptor, load_mode_descriptor, resolve_mode_path
from modebridge.runtime.boot import boot_mode, load_resource_tree
from modebridge.settings.backends import create_backend
from modebridge.settings.store import LanguagePreference
from modebridge.utils.exceptions import ModeLoadError

app = typer.Typer(
    name="modebridge",
    help=f"{__logo__} modebridge - drawing mode runtime bridge",
    no_args_is_help=True,
)

# stdout belongs to IPC frames while a mode runs
console = Console(stderr=True)
out = Console()


def print_json(data: Any) -> None:
    out.print(json.dumps(data, indent=2, ensure_ascii=False), markup=False, highlight=False, soft_wrap=True)


def _load_descriptor(mode_path: str) -> ModeDescriptor:
    try:
        return load_mode_descriptor(resolve_mode_path(mode_path))
    except ModeLoadError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)


def _load_config() -> Config:
    config = load_config()
    configure_console_logging(config.logging.level)
    return config


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} modebridge v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """modebridge - drawing mode runtime bridge."""
    pass


register_settings_commands(app, console)


@app.command()
def run(
    mode_path: str = typer.Argument(..., help="Mode page, mode directory or host location"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
):
    """Boot a mode and talk to its host over stdin/stdout until it closes."""
    config = _load_config()
    level = "DEBUG" if verbose else config.logging.level
    configure_console_logging(level)
    if config.logging.file_enabled:
        log_path = ensure_rotating_log_file("run", level=level)
        console.print(f"[dim]Logs: {log_path}[/dim]")

    async def _serve() -> None:
        transport = StdioTransport()
        stop = asyncio.Event()
        context = await boot_mode(mode_path, config, transport, on_terminal=stop.set)
        try:
            reader = await open_stdin_reader()
            await transport.serve(reader, stop)
        finally:
            await context.aclose()

    try:
        asyncio.run(_serve())
    except ModeLoadError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\nInterrupted.")


@app.command()
def resources(
    mode_path: str = typer.Argument(..., help="Mode page or mode directory"),
    lang: str = typer.Option("", "--lang", "-l", help="Only this language"),
    languages: bool = typer.Option(False, "--languages", help="List available languages instead"),
):
    """Print the merged translation resources for a mode."""
    config = _load_config()
    descriptor = _load_descriptor(mode_path)
    tree = load_resource_tree(descriptor, config)
    if languages:
        print_json(available_languages(tree))
        return
    data = tree_to_dict(tree)
    if lang:
        if lang not in data:
            console.print(f"[red]No resources for language {lang}[/red]")
            raise typer.Exit(1)
        data = data[lang]
    print_json(data)


@app.command()
def translate(
    mode_path: str = typer.Argument(..., help="Mode page or mode directory"),
    lang: str = typer.Option("", "--lang", "-l", help="Language (default: stored preference)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the page here instead of stdout"),
):
    """Render a mode's page translated with its declared strategy."""
    config = _load_config()
    descriptor = _load_descriptor(mode_path)
    try:
        document = Document.from_file(descriptor.path)
    except OSError as e:
        console.print(f"[red]Cannot read mode page {descriptor.path}: {e}[/red]")
        raise typer.Exit(1)

    if lang:
        language = lang
    else:
        backend = create_backend(config.storage.backend, config.storage.directory_path)
        language = LanguagePreference(backend, default=config.i18n.default_language).get()
    catalog = Catalog(
        load_resource_tree(descriptor, config),
        fallback_language=config.i18n.fallback_language,
        language=language,
    )
    Translator(
        catalog,
        document,
        strategy_for(descriptor.translation, descriptor.directory, descriptor.name),
    ).translate()

    rendered = document.render()
    if output is None:
        out.print(rendered, markup=False, highlight=False, soft_wrap=True)
        return
    output.write_text(rendered, encoding="utf-8")
    console.print(f"[green]✓[/green] Wrote {descriptor.name} ({catalog.language}) to {output}")
