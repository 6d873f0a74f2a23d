"""
State Layer - Runtime Data Models

This module defines the runtime state of one conversation. It implements a
Call Stack pattern: each active interaction owns one Frame holding its cursor
and its own typed field struct. The whole stack is persisted between turns.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..domain.models import CaptureKind, InputHint, InteractionId, UserIdentity


class StackInvariantError(RuntimeError):
    """
    Raised when the dialog stack is driven into an undefined state
    (pop on empty, cursor out of range, undeclared capture, runaway chain).
    Internal fault, never a user-facing failure.
    """
    pass


# ==============================================================================
# Per-interaction field structs
# ==============================================================================

class RootFields(BaseModel):
    kind: Literal["root"] = "root"
    restart_message: Optional[str] = None


class RegistrationFields(BaseModel):
    kind: Literal["registration"] = "registration"
    user: Optional[UserIdentity] = None
    agency: Optional[str] = None
    interests: Optional[str] = None


class CancellationFields(BaseModel):
    kind: Literal["cancellation"] = "cancellation"
    user: Optional[UserIdentity] = None


class QuestionFields(BaseModel):
    kind: Literal["question"] = "question"
    user: Optional[UserIdentity] = None
    question: Optional[str] = None


FrameFields = Annotated[
    Union[RootFields, RegistrationFields, CancellationFields, QuestionFields],
    Field(discriminator="kind"),
]


# ==============================================================================
# Frames and the stack
# ==============================================================================

class OutgoingMessage(BaseModel):
    """One message rendered to the transport."""
    text: str
    speak: Optional[str] = None
    input_hint: InputHint = InputHint.IGNORING


class PendingCapture(BaseModel):
    """
    The question a frame is waiting on. Kept so that an invalid answer can be
    re-prompted without moving the cursor.
    """
    kind: CaptureKind
    prompt: OutgoingMessage


class DialogFrame(BaseModel):
    """
    Represents a single interaction on the call stack.

    `step_index` points at the step that receives the next value: the answer
    to `pending_capture` when the frame is on top, or the child's result when
    a child frame sits above it.
    """
    interaction: InteractionId
    step_index: int = 0
    fields: FrameFields
    pending_capture: Optional[PendingCapture] = None

    @property
    def awaiting_input(self) -> bool:
        return self.pending_capture is not None


class DialogStack(BaseModel):
    """
    The runtime state of a single conversation, most-recent frame last.
    """
    session_id: str
    frames: List[DialogFrame] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_empty(self) -> bool:
        return not self.frames

    @property
    def depth(self) -> int:
        return len(self.frames)

    def top(self) -> Optional[DialogFrame]:
        if not self.frames:
            return None
        return self.frames[-1]

    def push(self, frame: DialogFrame) -> DialogFrame:
        self.frames.append(frame)
        return frame

    def pop(self) -> DialogFrame:
        if not self.frames:
            raise StackInvariantError(f"Pop on empty dialog stack (session {self.session_id}).")
        return self.frames.pop()

    def reset(self) -> None:
        self.frames.clear()
