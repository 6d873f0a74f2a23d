"""
Domain Layer - Static Data Models

Defines the assistant's static vocabulary: interactions, intents, input
captures, user identity and committed records.
"""

from rsvp_assistant.domain.models import (
    AttendeeRecord,
    CaptureKind,
    ClassificationResult,
    InputHint,
    Intent,
    Interaction,
    InteractionId,
    NotificationKind,
    Outcome,
    QuestionRecord,
    StepHandler,
    UserIdentity,
)

__all__ = [
    "AttendeeRecord",
    "CaptureKind",
    "ClassificationResult",
    "InputHint",
    "Intent",
    "Interaction",
    "InteractionId",
    "NotificationKind",
    "Outcome",
    "QuestionRecord",
    "StepHandler",
    "UserIdentity",
]
