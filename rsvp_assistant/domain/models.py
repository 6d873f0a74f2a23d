"""
Domain Layer - Static Data Models

This module defines the static vocabulary of the assistant: which interactions
exist, which intents the classifier may report, which input captures a step may
wait on, and the records handed to the persistence collaborator once an
interaction commits.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, FrozenSet, List, Literal, Optional, Type

from pydantic import BaseModel, Field


class InteractionId(str, Enum):
    """
    Closed set of interactions the engine can run.

    ROOT is pushed once per session and never popped; the others are
    children started by the root's intent router.
    """
    ROOT = "root"
    REGISTRATION = "registration"
    CANCELLATION = "cancellation"
    QUESTION = "question"


class Intent(str, Enum):
    """Intent tags produced by the NLU collaborator."""
    RSVP = "RSVPIntent"
    CANCEL = "CancelIntent"
    QUESTION = "QuestionIntent"
    GET_PARTICIPANTS = "GetParticipantsIntent"
    EVENT_DETAILS = "EventDetailsIntent"
    ADD_CALENDAR = "AddCalendarIntent"
    GREETINGS = "GreetingsIntent"
    NONE = "None"


class CaptureKind(str, Enum):
    """
    Reusable input-capture behaviours.

    TEXT: any non-blank utterance, delivered stripped.
    CONFIRM: a yes/no answer, delivered as a bool.
    """
    TEXT = "text"
    CONFIRM = "confirm"


class InputHint(str, Enum):
    """Tells richer channels whether the assistant now expects a reply."""
    EXPECTING = "expectingInput"
    ACCEPTING = "acceptingInput"
    IGNORING = "ignoringInput"


class Outcome(str, Enum):
    """Result tags a child interaction ends with after committing."""
    REGISTERED = "registered"
    CANCELLED = "cancelled"
    QUESTION_SENT = "question-sent"


class NotificationKind(str, Enum):
    REGISTRATION = "registration"
    CANCELLATION = "cancellation"
    QUESTION = "question"


class UserIdentity(BaseModel):
    """
    The person on the other side of the channel.

    Attributes:
        address: Opaque contact address supplied by the transport (e-mail for
            most channels). Used as the stable record key.
        display_name: Name as shown by the channel, e.g. "Jane Doe (Contractor)".
    """
    address: str
    display_name: str = ""

    @property
    def name(self) -> str:
        """Display name with any parenthetical suffix removed."""
        cut = self.display_name.find("(")
        if cut == -1:
            return self.display_name
        return self.display_name[:cut].rstrip()

    @property
    def record_key(self) -> str:
        return self.address


# ==============================================================================
# Committed records (handed to the persistence collaborator)
# ==============================================================================

class AttendeeRecord(BaseModel):
    id: str
    email: str
    name: str
    agency: Optional[str] = None
    interests: Optional[str] = None
    rsvp: Literal["yes", "no"] = "yes"


class QuestionRecord(BaseModel):
    id: str
    email: str
    question: str


# ==============================================================================
# Interaction definitions
# ==============================================================================

# A step is an async callable `(ctx, fields, previous) -> StepResult`.
# `fields` is the frame's own field struct. `previous` is whatever the prior
# step passed on, the captured answer to the prior prompt, or a child's result.
StepHandler = Callable[..., Awaitable[Any]]


@dataclass
class Interaction:
    """
    An ordered sequence of steps (a "waterfall").

    Attributes:
        id: Which interaction this is.
        title: Human-readable name used in logs and the session resource.
        fields_model: Field struct private to frames of this interaction.
            Built from the seed handed over when the frame is pushed.
        steps: The waterfall, executed strictly in order.
        captures: Input captures a step of this interaction may await.
    """
    id: InteractionId
    title: str
    fields_model: Type[BaseModel]
    steps: List[StepHandler] = field(default_factory=list)
    captures: FrozenSet[CaptureKind] = frozenset()

    def step_at(self, index: int) -> Optional[StepHandler]:
        if 0 <= index < len(self.steps):
            return self.steps[index]
        return None


class ClassificationResult(BaseModel):
    """Structured answer of the NLU collaborator."""
    intent: Intent = Field(
        ...,
        description="The single best matching intent tag.",
    )
    confidence: float = Field(
        0.0,
        ge=0.0,
        le=1.0,
        description="Confidence in the chosen intent, 0.0 to 1.0.",
    )
    entities: dict[str, str] = Field(
        default_factory=dict,
        description="Values mentioned by the user, e.g. {'agency': 'Acme'} or {'question': '...'}.",
    )
