"""Boot a mode: descriptor, storage, resources, translation, lifecycle, entry, join."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
from loguru import logger

from modebridge.config.schema import Config
from modebridge.dom.document import Document
from modebridge.i18n.catalog import Catalog
from modebridge.i18n.resources import ResourceMergeEngine, ResourceTree
from modebridge.i18n.translator import Translator, strategy_for
from modebridge.ipc.transport import IpcTransport
from modebridge.lifecycle.commands import CommandChannel
from modebridge.lifecycle.coordinator import LifecycleCoordinator
from modebridge.mode.descriptor import ModeDescriptor, load_mode_descriptor, resolve_mode_path
from modebridge.mode.entry import load_capabilities
from modebridge.runtime.cncserver import CncServerClient
from modebridge.runtime.context import ModeApi, ModeContext
from modebridge.runtime.join import BootJoin
from modebridge.settings.backends import KeyValueBackend, create_backend
from modebridge.settings.store import AppSettings, LanguagePreference, SettingsStore, SvgStore
from modebridge.utils.exceptions import CncServerError, ModeLoadError

BOT_PREREQUISITE = "bot"
PAPER_PREREQUISITE = "paper"

# loader(descriptor, library_name, done) -- call done() once the library is usable
LibraryLoader = Callable[[ModeDescriptor, str, Callable[[], None]], None]


def _load_document(descriptor: ModeDescriptor) -> Document:
    try:
        return Document.from_file(descriptor.path)
    except OSError as e:
        raise ModeLoadError(f"mode page unreadable: {descriptor.path} ({e})", path=str(descriptor.path)) from e


def load_resource_tree(descriptor: ModeDescriptor, config: Config) -> ResourceTree:
    """Shared translations from the application, mode-local ones from the mode's ``_i18n``."""
    return ResourceMergeEngine(config.shared_i18n_dir, descriptor.i18n_dir, descriptor.name).build()


def complete_boot(context: ModeContext) -> None:
    """Every prerequisite is in: settle the queue, go ready, let the mode bind its controls."""
    context.commands.run(["clear", "resume"])
    context.coordinator.mark_ready()
    caps = context.capabilities
    if caps.bind_controls is not None:
        caps.bind_controls()
    if caps.page_init_ready is not None:
        caps.page_init_ready()
    logger.info("Mode {} ready", context.name)


async def boot_mode(
    mode_path: str | Path,
    config: Config,
    transport: IpcTransport,
    *,
    backend: KeyValueBackend | None = None,
    library_loader: LibraryLoader | None = None,
    http_client: httpx.AsyncClient | None = None,
    on_terminal: Callable[[], None] | None = None,
) -> ModeContext:
    """
    Build and start one mode.

    ``mode_path`` is a path, a ``file://`` URL or a host location whose fragment
    carries the encoded page path. A broken ``package.json`` raises
    ``ModeLoadError``. The mode turns ready once the bot profile (and the paper
    library, when the mode depends on it) has loaded.
    """
    path = resolve_mode_path(mode_path) if isinstance(mode_path, str) else Path(mode_path)
    descriptor = load_mode_descriptor(path)
    logger.info("Booting mode {} ({} {})", descriptor.name, descriptor.package_name, descriptor.version)

    backend = backend or create_backend(config.storage.backend, config.storage.directory_path)
    app_settings = AppSettings(backend)
    app_settings.reload()
    language = LanguagePreference(backend, default=config.i18n.default_language)
    settings = SettingsStore(backend, descriptor.name)
    settings.load()

    document = _load_document(descriptor)
    settings.bind_document(document)

    tree = load_resource_tree(descriptor, config)
    catalog = Catalog(tree, fallback_language=config.i18n.fallback_language, language=language.get())

    commands = CommandChannel(transport)
    coordinator = LifecycleCoordinator(
        transport,
        commands,
        mode_name=descriptor.name,
        settings=settings,
        app_settings=app_settings,
        on_terminal=on_terminal,
    )
    translator = Translator(
        catalog,
        document,
        strategy_for(descriptor.translation, descriptor.directory, descriptor.name),
        language_source=language.get,
        on_complete=coordinator.notify_translate_complete,
    )
    coordinator.translator = translator

    context = ModeContext(
        descriptor=descriptor,
        config=config,
        transport=transport,
        backend=backend,
        document=document,
        settings=settings,
        app_settings=app_settings,
        language=language,
        svg=SvgStore(backend),
        tree=tree,
        catalog=catalog,
        translator=translator,
        commands=commands,
        coordinator=coordinator,
        cncserver=CncServerClient(config.cncserver, app_settings, http_client=http_client),
    )
    context.api = ModeApi(context)
    context.capabilities = load_capabilities(descriptor, context.api)
    coordinator.capabilities = context.capabilities
    coordinator.attach()

    translator.translate_when_ready()
    document.mark_ready()

    prerequisites = [BOT_PREREQUISITE]
    if descriptor.depends_on(PAPER_PREREQUISITE):
        prerequisites.append(PAPER_PREREQUISITE)
    join = BootJoin(prerequisites, lambda: complete_boot(context))
    context.join = join

    if PAPER_PREREQUISITE in prerequisites:
        if library_loader is None:
            logger.debug("No library loader for mode {}, treating paper as loaded", descriptor.name)
            join.resolve(PAPER_PREREQUISITE)
        else:
            library_loader(descriptor, PAPER_PREREQUISITE, lambda: join.resolve(PAPER_PREREQUISITE))

    try:
        context.bot = await context.cncserver.fetch_bot()
    except CncServerError as e:
        logger.error("Mode {} could not read the bot profile: {}", descriptor.name, e)
    else:
        context.canvas = context.bot.canvas()
        context.svg.canvas_size = context.canvas
    join.resolve(BOT_PREREQUISITE)
    return context
