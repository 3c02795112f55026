"""Inter-process channel between a mode and its host."""

from modebridge.ipc.protocol import (
    CHANNEL_CNCSERVER,
    CHANNEL_CNCSERVER_RUN,
    CHANNEL_GLOBAL_CLOSE,
    CHANNEL_MODE_CHANGE,
    CHANNEL_SETTINGS_UPDATE,
    CLOSE_CHANNELS,
    IpcFrame,
    decode_frame_line,
    encode_frame_line,
)
from modebridge.ipc.transport import IpcTransport, LocalTransport, StdioTransport, open_stdin_reader

__all__ = [
    "CHANNEL_CNCSERVER",
    "CHANNEL_CNCSERVER_RUN",
    "CHANNEL_GLOBAL_CLOSE",
    "CHANNEL_MODE_CHANGE",
    "CHANNEL_SETTINGS_UPDATE",
    "CLOSE_CHANNELS",
    "IpcFrame",
    "IpcTransport",
    "LocalTransport",
    "StdioTransport",
    "decode_frame_line",
    "encode_frame_line",
    "open_stdin_reader",
]
