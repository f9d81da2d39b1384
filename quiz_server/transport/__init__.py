from quiz_server.transport.base import LineConnection

__all__ = ["LineConnection"]
