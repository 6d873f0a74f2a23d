"""
Interactions - The waterfalls the engine can run.

INTERACTIONS maps every InteractionId to its definition; the engine looks
frames up here by their tag.
"""

from typing import Dict

from rsvp_assistant.domain.models import Interaction, InteractionId
from rsvp_assistant.interactions.cancellation import CANCELLATION
from rsvp_assistant.interactions.question import QUESTION
from rsvp_assistant.interactions.registration import REGISTRATION
from rsvp_assistant.interactions.root import ROOT

INTERACTIONS: Dict[InteractionId, Interaction] = {
    interaction.id: interaction
    for interaction in (ROOT, REGISTRATION, CANCELLATION, QUESTION)
}

__all__ = [
    "CANCELLATION",
    "INTERACTIONS",
    "QUESTION",
    "REGISTRATION",
    "ROOT",
]
