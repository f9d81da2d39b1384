from quiz_server.core.config import Settings, settings
from quiz_server.db import engine
from quiz_server.services.session_manager import SessionRegistry
from quiz_server.services.store import QuizStore

session_registry = SessionRegistry()
quiz_store = QuizStore(engine)


def get_settings() -> Settings:
    return settings


def get_session_registry() -> SessionRegistry:
    return session_registry


def get_quiz_store() -> QuizStore:
    return quiz_store
