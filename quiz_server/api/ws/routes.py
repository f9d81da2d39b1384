import logging
from collections import deque
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from quiz_server.core.config import Settings
from quiz_server.core.errors import ConnectionClosed
from quiz_server.dependencies import get_quiz_store, get_session_registry, get_settings
from quiz_server.services.session_manager import SessionRegistry
from quiz_server.services.store import QuizStore
from quiz_server.transport.base import LineConnection

logger = logging.getLogger("session")

router = APIRouter()


class WebSocketConnection(LineConnection):
    """Line connection over text frames; a frame may carry several lines."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.pending: deque[str] = deque()
        self.closed = False

    async def read_line(self) -> Optional[str]:
        while not self.pending:
            try:
                text = await self.websocket.receive_text()
            except WebSocketDisconnect:
                self.closed = True
                return None
            except KeyError:
                # binary frame ends the input; the session closes the socket
                logger.warning("Binary frame received, closing session")
                return None
            self.pending.extend(text.splitlines() or [""])
        return self.pending.popleft()

    async def send(self, text: str) -> None:
        if self.closed:
            raise ConnectionClosed()
        try:
            await self.websocket.send_text(text)
        except (WebSocketDisconnect, RuntimeError) as exc:
            self.closed = True
            raise ConnectionClosed() from exc

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            await self.websocket.close()
        except RuntimeError as exc:
            logger.debug("WebSocket already closed: %s", exc)


@router.websocket("/ws/session")
async def quiz_socket(
    websocket: WebSocket,
    registry: SessionRegistry = Depends(get_session_registry),
    store: QuizStore = Depends(get_quiz_store),
    settings: Settings = Depends(get_settings),
):
    await websocket.accept()
    await registry.serve(WebSocketConnection(websocket), store, settings)
