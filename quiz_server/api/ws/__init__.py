from quiz_server.api.ws.routes import router

__all__ = ["router"]
