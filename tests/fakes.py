"""Test doubles for the external collaborators (NLU, notification sink)."""

import asyncio
from typing import Dict, List, Optional, Tuple

from rsvp_assistant.domain.models import ClassificationResult, Intent, NotificationKind
from rsvp_assistant.nlu.interface import IntentClassifier
from rsvp_assistant.services.notifications import Notifier


class FakeIntentClassifier(IntentClassifier):
    """Deterministic classifier keyed by the lower-cased utterance.

    Unknown utterances classify as Intent.NONE with low confidence.
    """

    def __init__(self, mapping: Optional[Dict[str, ClassificationResult]] = None):
        self.mapping = mapping or {}
        self.calls: List[str] = []

    async def classify(self, text: str) -> ClassificationResult:
        self.calls.append(text)
        return self.mapping.get(
            text.strip().lower(),
            ClassificationResult(intent=Intent.NONE, confidence=0.2),
        )


class PausingIntentClassifier(FakeIntentClassifier):
    """Yields to the event loop before answering, like a real network call."""

    async def classify(self, text: str) -> ClassificationResult:
        for _ in range(3):
            await asyncio.sleep(0)
        return await super().classify(text)


class FailingIntentClassifier(IntentClassifier):
    async def classify(self, text: str) -> ClassificationResult:
        raise RuntimeError("classifier unavailable")


class RecordingNotifier(Notifier):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[Tuple[NotificationKind, dict]] = []

    async def notify(self, kind: NotificationKind, payload: dict) -> None:
        if self.fail:
            raise ConnectionError("mail relay down")
        self.sent.append((kind, payload))

    def kinds(self) -> List[NotificationKind]:
        return [kind for kind, _ in self.sent]


DEFAULT_INTENTS = {
    "rsvp": ClassificationResult(intent=Intent.RSVP, confidence=0.9),
    "cancel my rsvp": ClassificationResult(intent=Intent.CANCEL, confidence=0.9),
    "cancel": ClassificationResult(intent=Intent.CANCEL, confidence=0.8),
    "i have a question": ClassificationResult(intent=Intent.QUESTION, confidence=0.9),
    "ask if there is parking": ClassificationResult(
        intent=Intent.QUESTION,
        confidence=0.85,
        entities={"question": "Is there parking?"},
    ),
    "register me, i'm with acme": ClassificationResult(
        intent=Intent.RSVP,
        confidence=0.95,
        entities={"agency": "Acme"},
    ),
    "who is coming": ClassificationResult(intent=Intent.GET_PARTICIPANTS, confidence=0.9),
    "where is it": ClassificationResult(intent=Intent.EVENT_DETAILS, confidence=0.9),
    "add to calendar": ClassificationResult(intent=Intent.ADD_CALENDAR, confidence=0.9),
    "hello": ClassificationResult(intent=Intent.GREETINGS, confidence=0.9),
}

