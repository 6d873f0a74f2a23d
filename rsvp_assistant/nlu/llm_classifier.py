"""
LLM Intent Classifier.

Classifies utterances by asking an LLMProvider for a structured
ClassificationResult. The system prompt is rendered from the
`classify_intent` template.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from ..domain.models import ClassificationResult, Intent
from ..llm.interface import LLMProvider
from ..prompts import Template, render
from .interface import IntentClassifier

logger = logging.getLogger(__name__)

INTENT_DESCRIPTIONS = {
    Intent.RSVP: "The user wants to register / RSVP for the event.",
    Intent.CANCEL: "The user wants to cancel their RSVP or says they can no longer attend.",
    Intent.QUESTION: "The user wants to send a question to the organizers.",
    Intent.GET_PARTICIPANTS: "The user asks who is attending.",
    Intent.EVENT_DETAILS: "The user asks when or where the event takes place.",
    Intent.ADD_CALENDAR: "The user wants to add the event to their calendar.",
    Intent.GREETINGS: "The user only greets the assistant.",
    Intent.NONE: "Anything else.",
}


class EntityFields(BaseModel):
    agency: Optional[str] = None
    interests: Optional[str] = None
    question: Optional[str] = None


class LLMClassification(BaseModel):
    """
    Response model sent to the provider. Entities are explicit fields because
    structured output cannot express an open mapping.
    """
    intent: Intent
    confidence: float
    entities: EntityFields


class LLMIntentClassifier(IntentClassifier):
    def __init__(self, llm_provider: LLMProvider, event_name: str, temperature: float = 0.0):
        self.llm = llm_provider
        self.event_name = event_name
        self.temperature = temperature

    async def classify(self, text: str) -> ClassificationResult:
        system_prompt = render(
            Template.CLASSIFY_INTENT,
            event_name=self.event_name,
            intents=[(intent.value, description) for intent, description in INTENT_DESCRIPTIONS.items()],
        )
        result = await self.llm.complete_structured(
            system_prompt=system_prompt,
            user_text=text,
            response_model=LLMClassification,
            temperature=self.temperature,
        )
        logger.debug(f"LLM classified utterance as {result.intent.value} ({result.confidence:.2f})")
        return ClassificationResult(
            intent=result.intent,
            confidence=min(max(result.confidence, 0.0), 1.0),
            entities=result.entities.model_dump(exclude_none=True),
        )
