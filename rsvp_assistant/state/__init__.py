"""
State Layer - Runtime Data Models

Defines the runtime state of a conversation: the dialog stack, its frames and
the typed field struct each interaction keeps on its frame.
"""

from rsvp_assistant.state.models import (
    CancellationFields,
    DialogFrame,
    DialogStack,
    OutgoingMessage,
    PendingCapture,
    QuestionFields,
    RegistrationFields,
    RootFields,
    StackInvariantError,
)

__all__ = [
    "CancellationFields",
    "DialogFrame",
    "DialogStack",
    "OutgoingMessage",
    "PendingCapture",
    "QuestionFields",
    "RegistrationFields",
    "RootFields",
    "StackInvariantError",
]
