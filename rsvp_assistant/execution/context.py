"""
Step Context - Everything a step may touch besides its own fields.

Collaborators are injected here by the engine so that steps stay free of
module-level clients and can be exercised with test doubles.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from ..config import Settings
from ..domain.models import UserIdentity
from ..state.models import OutgoingMessage
from .schemas.state_machine import TransitionMeta

if TYPE_CHECKING:
    from ..nlu.interface import IntentClassifier
    from ..services.commitments import CommitmentService


@dataclass
class StepContext:
    user: UserIdentity
    settings: Settings
    commitments: "CommitmentService"
    classifier: Optional["IntentClassifier"] = None
    outbox: List[OutgoingMessage] = field(default_factory=list)
    transitions: List[TransitionMeta] = field(default_factory=list)

    @property
    def nlu_configured(self) -> bool:
        return self.classifier is not None

    def send(self, message: OutgoingMessage) -> None:
        self.outbox.append(message)
