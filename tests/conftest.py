"""
Shared fixtures: a scripted line connection and an in-memory quiz store.
"""
import random
from collections import deque
from typing import Callable, Iterable, Optional, Union

import pytest

from quiz_server.core.config import Settings
from quiz_server.core.errors import ConnectionClosed, NotFound
from quiz_server.models import Quiz
from quiz_server.services.session_manager import QuizSession
from quiz_server.services.store import validate_quiz
from quiz_server.transport.base import LineConnection

PROMPT = "quiz > "

CAPITALS = [
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
    ("Capital of Portugal", "Lisbon"),
]

Reply = Union[str, Callable[[str], str]]


class ScriptedConnection(LineConnection):
    """Feeds scripted lines and records everything sent.

    A callable reply receives the last text sent (usually the prompt) and
    returns the line to feed. Running out of lines behaves like the peer
    hanging up.
    """

    def __init__(self, lines: Iterable[Reply] = ()):
        self.lines = deque(lines)
        self.sent: list[str] = []
        self.closed = False

    async def read_line(self) -> Optional[str]:
        if not self.lines:
            self.closed = True
            return None
        reply = self.lines.popleft()
        if callable(reply):
            reply = reply(self.sent[-1] if self.sent else "")
        return reply

    async def send(self, text: str) -> None:
        if self.closed:
            raise ConnectionClosed()
        self.sent.append(text)

    async def close(self) -> None:
        self.closed = True

    @property
    def output(self) -> str:
        return "".join(self.sent)

    @property
    def prompts(self) -> int:
        return self.sent.count(PROMPT)


class MemoryQuizStore:
    """Dict-backed stand-in for QuizStore; hands out copies like a real DB."""

    def __init__(self, pairs: Iterable[tuple] = ()):
        self.quizzes: dict[int, Quiz] = {}
        self.next_id = 1
        for question, answer in pairs:
            self._insert(question, answer)

    def _insert(self, question: str, answer: str) -> Quiz:
        quiz = Quiz(id=self.next_id, question=question, answer=answer)
        self.quizzes[quiz.id] = quiz
        self.next_id += 1
        return quiz

    @staticmethod
    def _copy(quiz: Quiz) -> Quiz:
        return Quiz(id=quiz.id, question=quiz.question, answer=quiz.answer)

    async def list_all(self):
        return [self._copy(q) for _, q in sorted(self.quizzes.items())]

    async def find_by_id(self, quiz_id):
        quiz = self.quizzes.get(quiz_id)
        return self._copy(quiz) if quiz else None

    async def count(self):
        return len(self.quizzes)

    async def create(self, question, answer):
        payload = validate_quiz(question, answer)
        return self._copy(self._insert(payload.question, payload.answer))

    async def update(self, quiz):
        payload = validate_quiz(quiz.question, quiz.answer)
        stored = self.quizzes.get(quiz.id)
        if not stored:
            raise NotFound(quiz.id)
        stored.question = payload.question
        stored.answer = payload.answer
        return self._copy(stored)

    async def delete(self, quiz_id):
        self.quizzes.pop(quiz_id, None)


@pytest.fixture
def settings():
    return Settings(_env_file=None, colorize=False, seed_quizzes=False)


@pytest.fixture
def store():
    return MemoryQuizStore(CAPITALS)


@pytest.fixture
def empty_store():
    return MemoryQuizStore()


@pytest.fixture
def run_session(settings):
    """Run a whole session over a scripted connection and return it."""

    async def runner(store, lines, rng: Optional[random.Random] = None):
        connection = ScriptedConnection(lines)
        session = QuizSession(connection, store, settings, rng=rng)
        await session.run()
        return connection, session

    return runner


def answer_for(prompt: str) -> str:
    """Correct reply to a quiz question prompt such as 'Capital of Spain? '."""
    question = prompt.rstrip()[:-1]
    return dict(CAPITALS)[question]
