"""Outbound command passthrough to the host's cncserver command buffer."""

from __future__ import annotations

from typing import Any, Sequence

from modebridge.ipc.protocol import CHANNEL_CNCSERVER, CHANNEL_CNCSERVER_RUN
from modebridge.ipc.transport import IpcTransport

LOCAL_CLEAR = "localclear"

CommandDescriptor = str | Sequence[Any]


def full_cancel_batch(message: str) -> list[CommandDescriptor]:
    """Clear, resume, park and report; ``localclear`` must stay last or it drops what follows it."""
    return [
        "clear",
        "resume",
        "park",
        ["status", message, True],
        ["progress", 0, 1],
        LOCAL_CLEAR,
    ]


class CommandChannel:
    """Fire-and-forget forwarding; nothing is validated locally and nothing is awaited."""

    def __init__(self, transport: IpcTransport):
        self.transport = transport

    def run(self, commands: CommandDescriptor | Sequence[CommandDescriptor], priority: bool = False) -> None:
        """
        Forward one descriptor (``"park"``, ``["move", {"x": 1, "y": 2}]``) or a list of them.

        ``priority`` puts the batch ahead of everything already queued on the host.
        """
        if priority:
            self.transport.send_to_host(CHANNEL_CNCSERVER_RUN, commands, True)
        else:
            self.transport.send_to_host(CHANNEL_CNCSERVER_RUN, commands)

    def full_cancel(self, message: str) -> None:
        self.run(full_cancel_batch(message), priority=True)

    def pause_till_empty(self, starting: bool) -> None:
        """Hold the shared buffer until this mode's local push buffer has drained, then resume."""
        self.transport.send_to_host(CHANNEL_CNCSERVER, "pauseTillEmpty", bool(starting))
