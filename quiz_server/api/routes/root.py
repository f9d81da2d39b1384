from typing import List

from fastapi import APIRouter, Depends

from quiz_server.dependencies import get_quiz_store, get_session_registry
from quiz_server.schemas import QuizRead, ServerStatus
from quiz_server.services.session_manager import SessionRegistry
from quiz_server.services.store import QuizStore

router = APIRouter()


@router.get("/", response_model=ServerStatus)
async def status(
    registry: SessionRegistry = Depends(get_session_registry),
    store: QuizStore = Depends(get_quiz_store),
):
    return ServerStatus(name="CORE Quiz", active_sessions=len(registry), quizzes=await store.count())


@router.get("/quizzes", response_model=List[QuizRead])
async def list_quizzes(store: QuizStore = Depends(get_quiz_store)):
    return [QuizRead(id=q.id, question=q.question, answer=q.answer) for q in await store.list_all()]
