"""
Input Captures - Reusable answer recognition for suspended steps.

When a step suspends with AwaitingInput it names a capture kind. On the next
turn the engine runs the user's text through that capture before the waiting
step sees it. A rejected answer re-renders the stored prompt and leaves the
frame exactly where it was.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from ..domain.models import CaptureKind, InputHint
from ..state.models import OutgoingMessage, PendingCapture

YES_WORDS = frozenset({"yes", "y", "yeah", "yep", "sure", "ok", "okay", "correct", "right", "true", "1"})
NO_WORDS = frozenset({"no", "n", "nope", "nah", "incorrect", "wrong", "false", "2"})

CONFIRM_RETRY_TEXT = "Please answer yes or no."


@dataclass
class CaptureOutcome:
    """
    Attributes:
        accepted: Whether the answer satisfied the capture.
        value: Recognized value (stripped text or bool) when accepted.
        retry: Messages to render when rejected.
    """
    accepted: bool
    value: Any = None
    retry: Optional[List[OutgoingMessage]] = None


def recognize_text(text: str, pending: PendingCapture) -> CaptureOutcome:
    answer = (text or "").strip()
    if answer:
        return CaptureOutcome(accepted=True, value=answer)
    return CaptureOutcome(accepted=False, retry=[pending.prompt])


def recognize_confirm(text: str, pending: PendingCapture) -> CaptureOutcome:
    answer = (text or "").strip().lower().rstrip(".!")
    if answer in YES_WORDS:
        return CaptureOutcome(accepted=True, value=True)
    if answer in NO_WORDS:
        return CaptureOutcome(accepted=True, value=False)
    return CaptureOutcome(
        accepted=False,
        retry=[
            OutgoingMessage(text=CONFIRM_RETRY_TEXT, speak=CONFIRM_RETRY_TEXT),
            pending.prompt,
        ],
    )


_RECOGNIZERS = {
    CaptureKind.TEXT: recognize_text,
    CaptureKind.CONFIRM: recognize_confirm,
}


def recognize(text: str, pending: PendingCapture) -> CaptureOutcome:
    return _RECOGNIZERS[pending.kind](text, pending)


def prompt_message(text: str, speak: str | None = None) -> OutgoingMessage:
    """A prompt that expects a reply."""
    return OutgoingMessage(text=text, speak=speak or text, input_hint=InputHint.EXPECTING)


def info_message(text: str, speak: str | None = None) -> OutgoingMessage:
    """A message that does not expect a reply."""
    return OutgoingMessage(text=text, speak=speak or text, input_hint=InputHint.IGNORING)
