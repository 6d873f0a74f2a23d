"""
Step Results - FSM State Transition Definitions

Tagged outcomes a Step returns to the engine, and the transition each one
causes on the dialog stack. Used by the engine (to drive the turn loop) and by
the interactions (to express what they want to happen next).
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional, Union

from ...domain.models import CaptureKind, InteractionId
from ...state.models import OutgoingMessage


class StateMachineTransition(Enum):
    """
    Strict State Machine terminology describing what happened to the stack pointers.
    """

    HOLD = auto()  # The frame now waits for the next user turn.
    ADVANCE = auto()  # The cursor moved to the next step of the same frame.
    PUSH = auto()  # A child frame was pushed onto the stack.
    POP = auto()  # The frame was popped and its parent resumed.
    RESTART = auto()  # The frame was rebuilt in place and runs from step 0.


class Marker(Enum):
    """Values delivered to a step that are not produced by any step."""

    CANCELLED = auto()  # The child interaction was abandoned by an interruption.


@dataclass
class AwaitingInput:
    """Render `prompt` and suspend the turn; the answer goes to the next step."""

    prompt: OutgoingMessage
    capture: CaptureKind = CaptureKind.TEXT


@dataclass
class PassToNext:
    """Advance to the next step of the same frame within the same turn."""

    value: Any = None


@dataclass
class EndFrame:
    """Pop this frame and resume the parent with `value`."""

    value: Optional[str] = None


@dataclass
class BeginChild:
    """Push a nested interaction seeded with already-known fields."""

    interaction: InteractionId
    seed: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ReplaceFrame:
    """Rebuild this frame from `seed` and run it again from step 0."""

    seed: Dict[str, Any] = field(default_factory=dict)


StepResult = Union[AwaitingInput, PassToNext, EndFrame, BeginChild, ReplaceFrame]


@dataclass
class TransitionMeta:
    """
    What a single step evaluation did to the stack. Collected per turn for
    logging and for tests asserting side-effect ordering.
    """

    transition_type: StateMachineTransition
    interaction: InteractionId
    step_index: int
