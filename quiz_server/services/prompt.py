import asyncio
from typing import Optional

from quiz_server.core.errors import ConnectionClosed
from quiz_server.services.presenter import Presenter
from quiz_server.transport.base import LineConnection


class PromptContinuation:
    """Ask the user for a line and await the reply.

    All reads of a session go through one lock, so an ask issued after
    another has resolved always sees the next line, and two asks can never
    interleave their prompt and reply.
    """

    def __init__(self, connection: LineConnection, presenter: Presenter, style: str = "red"):
        self.connection = connection
        self.presenter = presenter
        self.style = style
        self.lock = asyncio.Lock()

    async def ask(self, text: str, default: Optional[str] = None) -> str:
        async with self.lock:
            await self.presenter.prompt(text, self.style)
            answer = (await self._read()).strip()
        if not answer and default is not None:
            return default
        return answer

    async def next_line(self) -> str:
        async with self.lock:
            return await self._read()

    async def _read(self) -> str:
        if self.connection.closed:
            raise ConnectionClosed()
        line = await self.connection.read_line()
        if line is None:
            raise ConnectionClosed()
        return line
