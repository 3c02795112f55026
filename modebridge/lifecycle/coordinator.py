"""Mode lifecycle: ready, pause and close handshakes with the host."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from loguru import logger

from modebridge.ipc.protocol import (
    CHANNEL_CNCSERVER,
    CHANNEL_GLOBAL_CLOSE,
    CHANNEL_MODE_CHANGE,
    CHANNEL_SETTINGS_UPDATE,
)
from modebridge.ipc.transport import IpcTransport
from modebridge.lifecycle.commands import CommandChannel
from modebridge.mode.capabilities import ModeCapabilities

if TYPE_CHECKING:
    from modebridge.i18n.translator import Translator
    from modebridge.settings.store import AppSettings, SettingsStore


class ModeState(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    PAUSING = "pausing"
    CLOSING = "closing"
    TERMINAL = "terminal"


# cncserver event name -> capability field
CNCSERVER_EVENTS = {
    "penUpdate": "on_pen_update",
    "bufferUpdate": "on_buffer_update",
    "fullyPaused": "on_fully_paused",
    "fullyResumed": "on_fully_resumed",
    "callbackEvent": "on_callback_event",
}
LANG_CHANGE_EVENT = "langChange"


class LifecycleCoordinator:
    """
    Owns the mode's lifecycle state and routes inbound host frames.

    Close handshake: the host asks on ``globalclose`` or ``modechange`` and
    waits for a frame back on the same channel. A mode with ``on_close`` gets
    an acknowledgment callable and may defer it (to park the pen, say); the
    host is answered only when it fires. Requests that arrive while one is
    pending are coalesced into that single acknowledgment.
    """

    def __init__(
        self,
        transport: IpcTransport,
        commands: CommandChannel,
        *,
        mode_name: str = "",
        capabilities: ModeCapabilities | None = None,
        translator: "Translator | None" = None,
        settings: "SettingsStore | None" = None,
        app_settings: "AppSettings | None" = None,
        on_terminal: Callable[[], None] | None = None,
    ):
        self.transport = transport
        self.commands = commands
        self.mode_name = mode_name
        self.capabilities = capabilities or ModeCapabilities()
        self.translator = translator
        self.settings = settings
        self.app_settings = app_settings
        self.on_terminal = on_terminal
        self._state = ModeState.INITIALIZING
        self._pending_close: list[str] | None = None
        self._ack: Callable[[], None] | None = None

    @property
    def state(self) -> ModeState:
        return self._state

    @property
    def close_pending(self) -> bool:
        return self._pending_close is not None

    def attach(self) -> None:
        """Register inbound handlers on the transport."""
        self.transport.on(CHANNEL_GLOBAL_CLOSE, lambda *args: self.request_close(CHANNEL_GLOBAL_CLOSE))
        self.transport.on(CHANNEL_MODE_CHANGE, lambda *args: self.request_close(CHANNEL_MODE_CHANGE))
        self.transport.on(CHANNEL_CNCSERVER, self.handle_cncserver)
        self.transport.on(CHANNEL_SETTINGS_UPDATE, self.handle_settings_update)

    def _transition(self, source: tuple[ModeState, ...], target: ModeState) -> bool:
        if self._state not in source:
            return False
        logger.debug("Mode {} state {} -> {}", self.mode_name, self._state.value, target.value)
        self._state = target
        return True

    # -- ready / pause ------------------------------------------------------

    def mark_ready(self) -> None:
        if not self._transition((ModeState.INITIALIZING,), ModeState.READY):
            logger.debug("Mode {} already past initialization ({})", self.mode_name, self._state.value)

    def pause_till_empty(self, starting: bool) -> None:
        self.commands.pause_till_empty(starting)
        if starting:
            self._transition((ModeState.READY,), ModeState.PAUSING)

    # -- close handshake ----------------------------------------------------

    def request_close(self, channel: str) -> None:
        if self._state is ModeState.TERMINAL:
            logger.debug("Mode {} already closed, acknowledging {} again", self.mode_name, channel)
            self.transport.send_to_host(channel)
            return
        if self.close_pending:
            if channel not in self._pending_close:
                self._pending_close.append(channel)
            logger.debug("Mode {} close already pending, {} coalesced", self.mode_name, channel)
            return

        previous = self._state
        self._pending_close = [channel]
        self._state = ModeState.CLOSING
        ack = self._make_ack()
        if self.capabilities.on_close is None:
            ack()
            return
        logger.info("Mode {} asked to close via {}, waiting for acknowledgment", self.mode_name, channel)
        try:
            self.capabilities.on_close(ack)
        except Exception:
            # reopen the handshake so the host can retry
            if self._state is ModeState.CLOSING:
                self._pending_close = None
                self._ack = None
                self._state = previous
            raise

    def _make_ack(self) -> Callable[[], None]:
        def ack() -> None:
            # stale or already fired
            if self._ack is not ack:
                return
            self._ack = None
            channels, self._pending_close = self._pending_close or [], None
            self._state = ModeState.TERMINAL
            for name in channels:
                self.transport.send_to_host(name)
            logger.info("Mode {} closed ({})", self.mode_name, ", ".join(channels))
            if self.on_terminal is not None:
                self.on_terminal()

        self._ack = ack
        return ack

    # -- inbound events -----------------------------------------------------

    def handle_cncserver(self, name: Any = None, payload: Any = None, *extra: Any) -> None:
        if self._state is ModeState.TERMINAL:
            logger.debug("Mode {} closed, dropping cncserver event {}", self.mode_name, name)
            return
        if name == "fullyPaused":
            self._transition((ModeState.READY,), ModeState.PAUSING)
        elif name == "fullyResumed":
            self._transition((ModeState.PAUSING,), ModeState.READY)

        if name == LANG_CHANGE_EVENT:
            if self.translator is not None:
                self.translator.translate()
            return

        hook_name = CNCSERVER_EVENTS.get(name)
        if hook_name is not None:
            hook = getattr(self.capabilities, hook_name)
            if hook is not None:
                hook(payload)
            return

        if self.capabilities.on_message is not None:
            self.capabilities.on_message(name, payload)

    def handle_settings_update(self, *args: Any) -> None:
        if self._state is ModeState.TERMINAL:
            logger.debug("Mode {} closed, dropping settings update", self.mode_name)
            return
        if self.app_settings is not None:
            self.app_settings.reload()
        if self.settings is not None:
            self.settings.load()
        logger.debug("Mode {} reloaded settings", self.mode_name)

    def notify_translate_complete(self) -> None:
        if self.capabilities.translate_complete is not None:
            self.capabilities.translate_complete()
