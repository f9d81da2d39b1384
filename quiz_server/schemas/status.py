from pydantic import BaseModel


class ServerStatus(BaseModel):
    name: str
    active_sessions: int
    quizzes: int
