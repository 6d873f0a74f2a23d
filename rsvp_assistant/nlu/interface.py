"""
Intent Classifier Interface.

Defines the contract for the NLU collaborator: turn one utterance into an
intent tag, a confidence and any entities the user mentioned.
"""
from abc import ABC, abstractmethod

from ..domain.models import ClassificationResult


class IntentClassifier(ABC):
    @abstractmethod
    async def classify(self, text: str) -> ClassificationResult:
        """
        Classifies the user's utterance.

        Returns:
            ClassificationResult with Intent.NONE when nothing matches.
        """
        pass
