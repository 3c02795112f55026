"""Per-mode runtime state and the API handed to a mode's entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from modebridge.config.schema import Config
from modebridge.dom.document import Document
from modebridge.i18n.catalog import Catalog
from modebridge.i18n.resources import ResourceTree, available_languages
from modebridge.i18n.translator import Translator
from modebridge.ipc.transport import IpcTransport
from modebridge.lifecycle.commands import CommandChannel, CommandDescriptor
from modebridge.lifecycle.coordinator import LifecycleCoordinator
from modebridge.mode.capabilities import ModeCapabilities
from modebridge.mode.descriptor import ModeDescriptor
from modebridge.runtime.cncserver import BotProfile, Canvas, CncServerClient
from modebridge.runtime.join import BootJoin
from modebridge.settings.backends import KeyValueBackend
from modebridge.settings.store import AppSettings, LanguagePreference, SettingsStore, SvgStore


@dataclass(eq=False)
class ModeContext:
    """Everything one running mode owns. Built once by ``boot_mode()`` and passed explicitly."""

    descriptor: ModeDescriptor
    config: Config
    transport: IpcTransport
    backend: KeyValueBackend
    document: Document
    settings: SettingsStore
    app_settings: AppSettings
    language: LanguagePreference
    svg: SvgStore
    tree: ResourceTree
    catalog: Catalog
    translator: Translator
    commands: CommandChannel
    coordinator: LifecycleCoordinator
    cncserver: CncServerClient
    capabilities: ModeCapabilities = field(default_factory=ModeCapabilities)
    join: BootJoin | None = None
    bot: BotProfile | None = None
    canvas: Canvas | None = None
    api: "ModeApi | None" = None

    @property
    def name(self) -> str:
        return self.descriptor.name

    async def aclose(self) -> None:
        await self.cncserver.close()


class ModeApi:
    """What a mode's ``setup(api)`` gets to work with."""

    def __init__(self, context: ModeContext):
        self._context = context
        self.t: Callable[..., str] = context.catalog.namespaced(f"modes.{context.name}")

    @property
    def mode(self) -> ModeDescriptor:
        return self._context.descriptor

    @property
    def settings(self) -> SettingsStore:
        return self._context.settings

    @property
    def app_settings(self) -> AppSettings:
        return self._context.app_settings

    @property
    def document(self) -> Document:
        return self._context.document

    @property
    def svg(self) -> SvgStore:
        return self._context.svg

    @property
    def cncserver(self) -> CncServerClient:
        return self._context.cncserver

    @property
    def canvas(self) -> Canvas | None:
        return self._context.canvas

    @property
    def bot(self) -> BotProfile | None:
        return self._context.bot

    @property
    def state(self) -> str:
        return self._context.coordinator.state.value

    def run(self, commands: CommandDescriptor | Sequence[CommandDescriptor], priority: bool = False) -> None:
        self._context.commands.run(commands, priority)

    def full_cancel(self, message: str) -> None:
        self._context.commands.full_cancel(message)

    def pause_till_empty(self, starting: bool) -> None:
        self._context.coordinator.pause_till_empty(starting)

    def translate(self) -> None:
        """Re-run translation by hand, as a language change would."""
        self._context.translator.translate()

    def languages(self) -> list[dict[str, str]]:
        return available_languages(self._context.tree)

    def global_t(self, key: str, **options: Any) -> str:
        """Look up a key outside this mode's namespace (``common.*``)."""
        return self._context.catalog.t(key, **options)
