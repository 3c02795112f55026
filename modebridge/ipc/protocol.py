"""IPC frames exchanged between a mode and the host, and their line encoding."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from modebridge.utils.exceptions import TransportError

# Host -> mode
CHANNEL_GLOBAL_CLOSE = "globalclose"
CHANNEL_MODE_CHANGE = "modechange"
CHANNEL_CNCSERVER = "cncserver"
CHANNEL_SETTINGS_UPDATE = "settingsUpdate"

# Mode -> host
CHANNEL_CNCSERVER_RUN = "cncserver-run"

CLOSE_CHANNELS = (CHANNEL_GLOBAL_CLOSE, CHANNEL_MODE_CHANGE)


@dataclass(slots=True)
class IpcFrame:
    """One message on a named channel."""

    channel: str
    args: list[Any] = field(default_factory=list)


def encode_frame_line(frame: IpcFrame) -> str:
    """Encode a frame into one line of JSON."""
    return json.dumps({"channel": frame.channel, "args": frame.args}, ensure_ascii=False)


def decode_frame_line(line: str) -> IpcFrame:
    """Decode one JSON line; raises TransportError for anything that is not a frame."""
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as e:
        raise TransportError(f"invalid JSON frame: {e}", raw=line) from e
    if not isinstance(payload, dict):
        raise TransportError("frame must be a JSON object", raw=line)
    channel = payload.get("channel")
    if not isinstance(channel, str) or not channel.strip():
        raise TransportError("frame has no channel", raw=line)
    args = payload.get("args", [])
    if args is None:
        args = []
    if not isinstance(args, list):
        args = [args]
    return IpcFrame(channel=channel.strip(), args=args)
