"""
Execution Layer - Dialog Orchestration

Defines the DialogEngine (turn dispatcher and trampoline), the interruption
filter, the reusable input captures and the step result types.
"""

from rsvp_assistant.execution.engine import DialogEngine, TurnResult
from rsvp_assistant.execution.interruptions import Interruption, InterruptionFilter


__all__ = [
    "DialogEngine",
    "Interruption",
    "InterruptionFilter",
    "TurnResult",
]
