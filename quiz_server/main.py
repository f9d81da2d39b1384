from contextlib import asynccontextmanager

from fastapi import FastAPI

from quiz_server.api.routes import root
from quiz_server.api.ws import router as ws_router
from quiz_server.core.config import settings
from quiz_server.core.logging import configure_logging
from quiz_server.db import init_db
from quiz_server.dependencies import quiz_store, session_registry
from quiz_server.transport.tcp import start_tcp_server


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await init_db()
    tcp_server = await start_tcp_server(
        session_registry, quiz_store, settings.tcp_host, settings.tcp_port, settings
    )
    yield
    tcp_server.close()
    await session_registry.close_all()
    await tcp_server.wait_closed()


app = FastAPI(title="CORE Quiz", lifespan=lifespan)

# HTTP routes
app.include_router(root.router)

# WebSocket routes
app.include_router(ws_router)


def run():
    import uvicorn

    uvicorn.run("quiz_server.main:app", host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    run()
