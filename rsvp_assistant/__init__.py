"""
RSVP Assistant

A conversational event-RSVP assistant built on a stack-based dialog engine:
typed interaction waterfalls, nested interactions that resume their parent
with a result, and global cancel/help interruptions.
"""

from rsvp_assistant.domain import (
    CaptureKind,
    ClassificationResult,
    Intent,
    Interaction,
    InteractionId,
    Outcome,
    UserIdentity,
)
from rsvp_assistant.state import (
    DialogFrame,
    DialogStack,
    OutgoingMessage,
    StackInvariantError,
)
from rsvp_assistant.execution import DialogEngine, InterruptionFilter, TurnResult

__all__ = [
    # Domain Layer
    "CaptureKind",
    "ClassificationResult",
    "Intent",
    "Interaction",
    "InteractionId",
    "Outcome",
    "UserIdentity",
    # State Layer
    "DialogFrame",
    "DialogStack",
    "OutgoingMessage",
    "StackInvariantError",
    # Execution Layer
    "DialogEngine",
    "InterruptionFilter",
    "TurnResult",
]
