from quiz_server.models.quiz import Quiz

__all__ = ["Quiz"]
