"""
Dependency Injection Wiring (Composition Root).

This module acts as the central "container" for the application's services.
It is responsible for:
1. Instantiating the core Singleton services (Repositories, Adapters, Engine).
2. Choosing adapters from configuration (Postgres vs. in-memory, LLM vs. no NLU,
   webhook vs. log-only notifications).
3. Managing the lifecycle of these objects using @lru_cache to ensure
   they are created only once per application process.

Tests override `get_chat_service` (or any provider below) through
`app.dependency_overrides`.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends

from ..config import settings
from ..execution.engine import DialogEngine
from ..interactions import INTERACTIONS
from ..llm.adapters.openai_adapter import OpenAIAdapter
from ..nlu.interface import IntentClassifier
from ..nlu.llm_classifier import LLMIntentClassifier
from ..repositories.records import (
    ATTENDEES,
    QUESTIONS,
    InMemoryRecordStore,
    PostgresRecordStore,
    RecordStore,
)
from ..repositories.session import (
    InMemorySessionRepository,
    PostgresSessionRepository,
    SessionRepository,
)
from ..services.background import BackgroundRunner
from ..services.chat import ChatService
from ..services.commitments import CommitmentService
from ..services.notifications import LoggingNotifier, Notifier, WebhookNotifier


# Intent Classifier (Singleton). None means "not configured".
@lru_cache()
def get_intent_classifier() -> Optional[IntentClassifier]:
    if not settings.nlu_configured:
        return None
    llm = OpenAIAdapter(api_key=settings.OPENAI_API_KEY, model_name=settings.OPENAI_MODEL)
    return LLMIntentClassifier(
        llm_provider=llm,
        event_name=settings.EVENT_NAME,
        temperature=settings.LLM_TEMPERATURE,
    )


# Session Repository (Singleton)
# Note: In-memory storage must be a singleton so data persists across requests!
@lru_cache()
def get_session_repository() -> SessionRepository:
    if settings.DATABASE_URL:
        return PostgresSessionRepository()
    return InMemorySessionRepository()


def _record_store(collection: str) -> RecordStore:
    if settings.DATABASE_URL:
        return PostgresRecordStore(collection)
    return InMemoryRecordStore(collection)


@lru_cache()
def get_attendee_store() -> RecordStore:
    return _record_store(ATTENDEES)


@lru_cache()
def get_question_store() -> RecordStore:
    return _record_store(QUESTIONS)


@lru_cache()
def get_notifier() -> Notifier:
    if settings.NOTIFY_WEBHOOK_URL:
        return WebhookNotifier(settings.NOTIFY_WEBHOOK_URL, timeout=settings.NOTIFY_TIMEOUT_SECONDS)
    return LoggingNotifier()


@lru_cache()
def get_background_runner() -> BackgroundRunner:
    return BackgroundRunner()


@lru_cache()
def get_commitment_service() -> CommitmentService:
    return CommitmentService(
        attendees=get_attendee_store(),
        questions=get_question_store(),
        notifier=get_notifier(),
        runner=get_background_runner(),
    )


# The Engine (Singleton Service)
@lru_cache()
def get_dialog_engine() -> DialogEngine:
    return DialogEngine(
        interactions=INTERACTIONS,
        commitments=get_commitment_service(),
        settings=settings,
        classifier=get_intent_classifier(),
    )


# The Chat Service (Singleton Service)
@lru_cache()
def get_chat_service(
    session_repo: SessionRepository = Depends(get_session_repository),
    engine: DialogEngine = Depends(get_dialog_engine),
) -> ChatService:
    """
    Injects all necessary components into the ChatService.
    """
    return ChatService(session_repository=session_repo, engine=engine)
