import asyncio
import logging
import random
import uuid
from typing import Dict, Optional, Tuple

from quiz_server.core.config import Settings, settings as default_settings
from quiz_server.core.errors import ConnectionClosed
from quiz_server.services.commands import COMMANDS
from quiz_server.services.presenter import Presenter
from quiz_server.services.prompt import PromptContinuation
from quiz_server.services.store import QuizStore
from quiz_server.transport.base import LineConnection

logger = logging.getLogger("session")


def split_command(line: str) -> Tuple[str, Optional[str]]:
    parts = line.split()
    if not parts:
        return "", None
    return parts[0].lower(), parts[1] if len(parts) > 1 else None


class QuizSession:
    """Command loop for a single connection."""

    def __init__(
        self,
        connection: LineConnection,
        store: QuizStore,
        settings: Settings = default_settings,
        rng: Optional[random.Random] = None,
    ):
        self.id = str(uuid.uuid4())[:8]
        self.connection = connection
        self.store = store
        self.settings = settings
        self.rng = rng
        self.presenter = Presenter(connection, colorize=settings.colorize)
        self.prompt = PromptContinuation(connection, self.presenter)
        self.active = True

    async def ready(self) -> None:
        await self.presenter.prompt(self.settings.prompt)

    async def run(self) -> None:
        logger.info("Session opened session=%s", self.id)
        try:
            await self.presenter.banner("CORE Quiz")
            await self.ready()
            while self.active:
                line = await self.prompt.next_line()
                await self.dispatch(line)
        except ConnectionClosed:
            logger.info("Connection closed by peer session=%s", self.id)
        finally:
            await self.close()
            logger.info("Session closed session=%s", self.id)

    async def dispatch(self, line: str) -> None:
        name, arg = split_command(line)
        if not name:
            await self.ready()
            return
        handler = COMMANDS.get(name)
        if handler is None:
            await self.presenter.error(f"Unknown command: '{name}'")
            await self.presenter.write("Use 'help' to see all the available commands.")
            await self.ready()
            return
        logger.info("Command session=%s name=%s arg=%r", self.id, name, arg)
        await handler(self, arg)

    async def close(self) -> None:
        self.active = False
        if not self.connection.closed:
            await self.connection.close()


class SessionRegistry:
    """Track the sessions that are currently connected."""

    def __init__(self):
        self.sessions: Dict[str, QuizSession] = {}
        self.lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self.sessions)

    async def serve(
        self,
        connection: LineConnection,
        store: QuizStore,
        settings: Settings = default_settings,
    ) -> QuizSession:
        session = QuizSession(connection, store, settings)
        async with self.lock:
            self.sessions[session.id] = session
        try:
            await session.run()
        finally:
            async with self.lock:
                self.sessions.pop(session.id, None)
        return session

    async def close_all(self) -> None:
        async with self.lock:
            sessions = list(self.sessions.values())
        for session in sessions:
            await session.close()
