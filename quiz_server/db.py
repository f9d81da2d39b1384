from contextlib import asynccontextmanager

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from quiz_server.core.config import settings
from quiz_server.models import Quiz


engine: AsyncEngine = create_async_engine(settings.assembled_db_url, echo=False, future=True)

SAMPLE_QUIZZES = [
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
    ("Capital of Portugal", "Lisbon"),
]


async def init_db(target: AsyncEngine = engine, seed: bool = settings.seed_quizzes) -> None:
    async with target.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    if seed:
        await seed_quizzes(target)


async def seed_quizzes(target: AsyncEngine = engine) -> None:
    """Fill an empty quiz table with a few sample questions."""
    async with get_session(target) as db:
        result = await db.execute(select(func.count()).select_from(Quiz))
        if result.scalar_one():
            return
        for question, answer in SAMPLE_QUIZZES:
            db.add(Quiz(question=question, answer=answer))
        await db.commit()


@asynccontextmanager
async def get_session(target: AsyncEngine = engine):
    async_session = AsyncSession(target, expire_on_commit=False)
    try:
        yield async_session
    finally:
        await async_session.close()
