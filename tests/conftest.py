"""Shared fixtures for RSVP assistant tests.

Uses FakeIntentClassifier and RecordingNotifier for deterministic, fast tests
without LLM API calls, databases or outbound HTTP.
"""

import pytest

from rsvp_assistant.config import Settings
from rsvp_assistant.domain.models import UserIdentity
from rsvp_assistant.execution.engine import DialogEngine
from rsvp_assistant.interactions import INTERACTIONS
from rsvp_assistant.repositories.records import ATTENDEES, QUESTIONS, InMemoryRecordStore
from rsvp_assistant.repositories.session import InMemorySessionRepository
from rsvp_assistant.services.background import BackgroundRunner
from rsvp_assistant.services.chat import ChatService
from rsvp_assistant.services.commitments import CommitmentService

from tests.fakes import DEFAULT_INTENTS, FakeIntentClassifier, RecordingNotifier


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, OPENAI_API_KEY=None, DATABASE_URL=None, CONFIDENCE_THRESHOLD=0.5)


@pytest.fixture
def user() -> UserIdentity:
    return UserIdentity(address="jane@example.com", display_name="Jane Doe (Contractor)")


@pytest.fixture
def classifier() -> FakeIntentClassifier:
    return FakeIntentClassifier(dict(DEFAULT_INTENTS))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def attendees() -> InMemoryRecordStore:
    return InMemoryRecordStore(ATTENDEES)


@pytest.fixture
def questions() -> InMemoryRecordStore:
    return InMemoryRecordStore(QUESTIONS)


@pytest.fixture
def runner() -> BackgroundRunner:
    return BackgroundRunner()


@pytest.fixture
def commitments(attendees, questions, notifier, runner) -> CommitmentService:
    return CommitmentService(attendees=attendees, questions=questions, notifier=notifier, runner=runner)


@pytest.fixture
def engine(commitments, settings, classifier) -> DialogEngine:
    return DialogEngine(
        interactions=INTERACTIONS,
        commitments=commitments,
        settings=settings,
        classifier=classifier,
    )


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def chat_service(session_repository, engine) -> ChatService:
    return ChatService(session_repository=session_repository, engine=engine)
