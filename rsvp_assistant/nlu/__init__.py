"""
NLU Layer - Intent classification collaborator.
"""

from rsvp_assistant.nlu.interface import IntentClassifier
from rsvp_assistant.nlu.llm_classifier import LLMIntentClassifier

__all__ = [
    "IntentClassifier",
    "LLMIntentClassifier",
]
