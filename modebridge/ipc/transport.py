"""Transports: deliver inbound frames in arrival order and send frames to the host."""

from __future__ import annotations

import asyncio
import sys
from collections import deque
from typing import Any, Callable, Protocol, TextIO, runtime_checkable

from loguru import logger

from modebridge.ipc.protocol import IpcFrame, decode_frame_line, encode_frame_line
from modebridge.utils.exceptions import TransportError

FrameHandler = Callable[..., None]


@runtime_checkable
class IpcTransport(Protocol):
    def on(self, channel: str, handler: FrameHandler) -> None: ...
    def send_to_host(self, channel: str, *args: Any) -> None: ...


class _Dispatcher:
    """
    Single inbound queue. A frame that arrives while another is being handled
    waits behind it, so handlers never re-enter and order is kept.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[FrameHandler]] = {}
        self._queue: deque[IpcFrame] = deque()
        self._dispatching = False

    def on(self, channel: str, handler: FrameHandler) -> None:
        self._handlers.setdefault(channel, []).append(handler)

    def deliver(self, frame: IpcFrame) -> None:
        self._queue.append(frame)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._queue:
                current = self._queue.popleft()
                handlers = self._handlers.get(current.channel)
                if not handlers:
                    logger.debug("No handler for inbound channel {}", current.channel)
                    continue
                for handler in list(handlers):
                    try:
                        handler(*current.args)
                    except Exception:
                        logger.exception("Handler for inbound channel {} failed", current.channel)
        finally:
            self._dispatching = False


class LocalTransport:
    """In-process transport: ``emit()`` plays the host, ``sent`` records outbound frames."""

    def __init__(self) -> None:
        self._dispatcher = _Dispatcher()
        self.sent: list[IpcFrame] = []

    def on(self, channel: str, handler: FrameHandler) -> None:
        self._dispatcher.on(channel, handler)

    def send_to_host(self, channel: str, *args: Any) -> None:
        self.sent.append(IpcFrame(channel=channel, args=list(args)))

    def emit(self, channel: str, *args: Any) -> None:
        self._dispatcher.deliver(IpcFrame(channel=channel, args=list(args)))

    def sent_on(self, channel: str) -> list[IpcFrame]:
        return [frame for frame in self.sent if frame.channel == channel]


class StdioTransport:
    """Line-delimited JSON frames: inbound on a stream reader, outbound on a text stream."""

    def __init__(self, writer: TextIO | None = None):
        self._dispatcher = _Dispatcher()
        self._writer = writer or sys.stdout

    def on(self, channel: str, handler: FrameHandler) -> None:
        self._dispatcher.on(channel, handler)

    def send_to_host(self, channel: str, *args: Any) -> None:
        self._writer.write(encode_frame_line(IpcFrame(channel=channel, args=list(args))) + "\n")
        self._writer.flush()

    def feed_line(self, line: str) -> None:
        text = line.strip()
        if not text:
            return
        try:
            frame = decode_frame_line(text)
        except TransportError as e:
            logger.warning("Host sent invalid frame: {}", e)
            return
        self._dispatcher.deliver(frame)

    async def serve(self, reader: asyncio.StreamReader, stop: asyncio.Event | None = None) -> None:
        """Read frames until EOF or until ``stop`` is set."""
        while stop is None or not stop.is_set():
            read = asyncio.ensure_future(reader.readline())
            waiters: set[asyncio.Future[Any]] = {read}
            if stop is not None:
                waiters.add(asyncio.ensure_future(stop.wait()))
            done, pending = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
            for task in pending:
                task.cancel()
            if read not in done:
                return
            raw = read.result()
            if not raw:
                logger.info("Host closed the IPC stream")
                return
            self.feed_line(raw.decode("utf-8", errors="replace"))


async def open_stdin_reader() -> asyncio.StreamReader:
    """Wrap the process stdin in an asyncio stream reader."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader
