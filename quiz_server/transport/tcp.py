import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from quiz_server.core.config import Settings, settings as default_settings
from quiz_server.core.errors import ConnectionClosed
from quiz_server.services.store import QuizStore
from quiz_server.transport.base import LineConnection

if TYPE_CHECKING:
    from quiz_server.services.session_manager import SessionRegistry

logger = logging.getLogger("session")


class StreamConnection(LineConnection):
    """Line connection over an asyncio TCP stream."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, encoding: str = "utf-8"):
        self.reader = reader
        self.writer = writer
        self.encoding = encoding
        self.closed = False
        self.peer = writer.get_extra_info("peername")

    async def read_line(self) -> Optional[str]:
        try:
            data = await self.reader.readline()
        except ConnectionError:
            data = b""
        except (ValueError, asyncio.LimitOverrunError) as exc:
            # An over-long line ends the conversation like end of input
            logger.warning("Line over the reader limit from peer=%s: %s", self.peer, exc)
            data = b""
        if not data:
            self.closed = True
            return None
        return data.decode(self.encoding, errors="replace").rstrip("\r\n")

    async def send(self, text: str) -> None:
        if self.closed:
            raise ConnectionClosed()
        try:
            self.writer.write(text.encode(self.encoding))
            await self.writer.drain()
        except ConnectionError as exc:
            self.closed = True
            raise ConnectionClosed() from exc

    async def close(self) -> None:
        if self.closed and self.writer.is_closing():
            return
        self.closed = True
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except ConnectionError as exc:
            logger.debug("Peer %s reset while closing: %s", self.peer, exc)


async def start_tcp_server(
    registry: "SessionRegistry",
    store: QuizStore,
    host: str,
    port: int,
    settings: Settings = default_settings,
) -> asyncio.AbstractServer:
    async def handle_client(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        connection = StreamConnection(reader, writer)
        logger.info("TCP client connected peer=%s", connection.peer)
        await registry.serve(connection, store, settings)

    server = await asyncio.start_server(handle_client, host, port, limit=settings.line_limit)
    logger.info("TCP quiz server listening on %s:%s", host, port)
    return server
