"""
Interruption Filter - Global cancel / help commands.

Consulted before normal dispatch on every turn. Matching is a plain
case-insensitive comparison of the whole utterance against a keyword set, so
it works whether or not intent recognition is configured and regardless of
which interaction is active.
"""

import logging
from enum import Enum, auto
from typing import Optional

from ..domain.models import InteractionId
from ..state.models import DialogStack

logger = logging.getLogger(__name__)

CANCEL_KEYWORDS = frozenset({"cancel", "quit"})
HELP_KEYWORDS = frozenset({"help", "?"})

CANCELLING_TEXT = "Cancelling..."
HELP_TEXT = (
    "I can help you RSVP for the event, cancel your RSVP, see who's attending, get the event details "
    "or send a question to the organizers. If I just asked you something, answer it to continue; "
    "otherwise tell me what you would like to do. Say \"cancel\" at any time to stop what we are doing."
)


class Interruption(Enum):
    CANCEL = auto()
    HELP = auto()


class InterruptionFilter:
    def __init__(self, cancel_keywords=CANCEL_KEYWORDS, help_keywords=HELP_KEYWORDS):
        self.cancel_keywords = frozenset(k.lower() for k in cancel_keywords)
        self.help_keywords = frozenset(k.lower() for k in help_keywords)

    def inspect(self, stack: DialogStack, text: Optional[str]) -> Optional[Interruption]:
        """
        Returns the interruption the utterance asks for, or None.

        Cancel only applies while a child interaction sits above the root;
        with the root alone there is nothing to unwind and the utterance is
        left to normal dispatch (where it is usually classified).
        """
        utterance = (text or "").strip().lower()
        if not utterance:
            return None

        if utterance in self.help_keywords:
            return Interruption.HELP

        if utterance in self.cancel_keywords:
            top = stack.top()
            if top is not None and top.interaction != InteractionId.ROOT:
                return Interruption.CANCEL
            logger.debug("Cancel keyword with no child interaction active; dispatching normally.")

        return None
