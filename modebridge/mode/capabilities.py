"""Optional lifecycle hooks a mode may implement."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable

# snake_case field -> name used by JS-era modes
_CAMEL_NAMES = {
    "on_close": "onClose",
    "on_pen_update": "onPenUpdate",
    "on_buffer_update": "onBufferUpdate",
    "on_fully_paused": "onFullyPaused",
    "on_fully_resumed": "onFullyResumed",
    "on_callback_event": "onCallbackEvent",
    "on_message": "onMessage",
    "translate_complete": "translateComplete",
    "bind_controls": "bindControls",
    "page_init_ready": "pageInitReady",
}


@dataclass(slots=True)
class ModeCapabilities:
    """
    Each hook is optional. Dispatch only checks presence; a missing hook is a no-op.

    on_close(ack)             -- close or mode change requested; call ``ack()`` when done
    on_pen_update(pen)        -- the bot moved; full cncserver pen object
    on_buffer_update(data)    -- command buffer changed
    on_fully_paused(data)     -- a requested pause has taken effect
    on_fully_resumed(data)    -- a requested resume has taken effect
    on_callback_event(name)   -- a named callback marker reached the front of the buffer
    on_message(name, data)    -- any other cncserver event
    translate_complete()      -- after every translation pass
    bind_controls()           -- page loaded and translated; bind buttons here
    page_init_ready()         -- boot finished
    """

    on_close: Callable[[Callable[[], None]], Any] | None = None
    on_pen_update: Callable[[Any], Any] | None = None
    on_buffer_update: Callable[[Any], Any] | None = None
    on_fully_paused: Callable[[Any], Any] | None = None
    on_fully_resumed: Callable[[Any], Any] | None = None
    on_callback_event: Callable[[Any], Any] | None = None
    on_message: Callable[[str, Any], Any] | None = None
    translate_complete: Callable[[], Any] | None = None
    bind_controls: Callable[[], Any] | None = None
    page_init_ready: Callable[[], Any] | None = None

    @classmethod
    def from_object(cls, obj: Any) -> "ModeCapabilities":
        """Collect hooks from an object or mapping, by snake_case or camelCase name."""
        if isinstance(obj, cls):
            return obj
        found: dict[str, Any] = {}
        for f in fields(cls):
            for name in (f.name, _CAMEL_NAMES[f.name]):
                value = obj.get(name) if isinstance(obj, dict) else getattr(obj, name, None)
                if callable(value):
                    found[f.name] = value
                    break
        return cls(**found)

    def present(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]
