import asyncio
import logging
from collections import Counter
from contextlib import asynccontextmanager
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from quiz_server.core.errors import NotFound, StoreFailure, ValidationError
from quiz_server.core.time import utc_now
from quiz_server.db import get_session
from quiz_server.models import Quiz
from quiz_server.schemas import QuizCreate

# SQLite INTEGER is a signed 64-bit value
MAX_QUIZ_ID = 2**63 - 1


def validate_quiz(question: str, answer: str) -> QuizCreate:
    try:
        return QuizCreate(question=question, answer=answer)
    except PydanticValidationError as exc:
        messages = []
        for error in exc.errors():
            cause = error.get("ctx", {}).get("error")
            messages.append(str(cause) if cause else f"{error['loc'][0]}: {error['msg']}")
        raise ValidationError(messages) from exc


class QuizStore:
    """Shared quiz collection backed by an async SQLModel engine.

    Every call opens its own database session, so concurrent connections
    can read freely. Updates and deletes are serialised per quiz id.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.logger = logging.getLogger("store")
        self.locks: dict[int, asyncio.Lock] = {}
        self.lock_users: Counter = Counter()

    @asynccontextmanager
    async def _session(self):
        try:
            async with get_session(self.engine) as db:
                yield db
        except SQLAlchemyError as exc:
            self.logger.error("Store failure: %s", exc)
            raise StoreFailure(str(exc)) from exc

    @asynccontextmanager
    async def _record_lock(self, quiz_id: int):
        """Hold the write lock of one quiz; dropped once nobody uses it."""
        lock = self.locks.setdefault(quiz_id, asyncio.Lock())
        self.lock_users[quiz_id] += 1
        try:
            async with lock:
                yield
        finally:
            self.lock_users[quiz_id] -= 1
            if not self.lock_users[quiz_id]:
                del self.lock_users[quiz_id]
                del self.locks[quiz_id]

    @staticmethod
    def _storable(quiz_id: int) -> bool:
        return -MAX_QUIZ_ID - 1 <= quiz_id <= MAX_QUIZ_ID

    async def list_all(self) -> List[Quiz]:
        async with self._session() as db:
            result = await db.execute(select(Quiz).order_by(Quiz.id))
            return list(result.scalars().all())

    async def find_by_id(self, quiz_id: int) -> Optional[Quiz]:
        if not self._storable(quiz_id):
            return None
        async with self._session() as db:
            return await db.get(Quiz, quiz_id)

    async def count(self) -> int:
        async with self._session() as db:
            result = await db.execute(select(func.count()).select_from(Quiz))
            return result.scalar_one()

    async def create(self, question: str, answer: str) -> Quiz:
        payload = validate_quiz(question, answer)
        async with self._session() as db:
            quiz = Quiz(question=payload.question, answer=payload.answer)
            db.add(quiz)
            await db.commit()
            await db.refresh(quiz)
        self.logger.info("Quiz created id=%s question=%r", quiz.id, quiz.question)
        return quiz

    async def update(self, quiz: Quiz) -> Quiz:
        payload = validate_quiz(quiz.question, quiz.answer)
        if not self._storable(quiz.id):
            raise NotFound(quiz.id)
        async with self._record_lock(quiz.id):
            async with self._session() as db:
                stored = await db.get(Quiz, quiz.id)
                if not stored:
                    raise NotFound(quiz.id)
                stored.question = payload.question
                stored.answer = payload.answer
                stored.updated_at = utc_now()
                await db.commit()
                await db.refresh(stored)
        self.logger.info("Quiz updated id=%s question=%r", stored.id, stored.question)
        return stored

    async def delete(self, quiz_id: int) -> None:
        if not self._storable(quiz_id):
            return
        async with self._record_lock(quiz_id):
            async with self._session() as db:
                await db.execute(delete(Quiz).where(Quiz.id == quiz_id))
                await db.commit()
        self.logger.info("Quiz deleted id=%s", quiz_id)
