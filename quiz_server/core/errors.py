from typing import Sequence


class QuizError(Exception):
    """Base class for every condition a command reports back to the user."""

    message = "Unexpected error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MissingParameter(QuizError):
    message = "Missing parameter <id>."


class NotANumber(QuizError):
    message = "The value of parameter <id> is not a number."


class NotFound(QuizError):
    def __init__(self, quiz_id: int):
        self.quiz_id = quiz_id
        super().__init__(f"There is no quiz with id={quiz_id}.")


class ValidationError(QuizError):
    """Store rejected a record; ``fields`` holds one message per bad field."""

    message = "The quiz is invalid:"

    def __init__(self, fields: Sequence[str]):
        self.fields = list(fields)
        super().__init__()


class StoreFailure(QuizError):
    pass


class ConnectionClosed(QuizError):
    message = "Connection closed"
