from quiz_server.schemas.quiz import QuizCreate, QuizRead
from quiz_server.schemas.status import ServerStatus

__all__ = ["QuizCreate", "QuizRead", "ServerStatus"]
