"""
Root - Idle prompt, intent routing and wrap-up.

The root frame lives for the whole session. Each pass runs
intro -> route -> wrap-up and then restarts itself in place with a shorter
prompt; child interactions started by the router sit above it on the stack.
"""

import logging
from typing import Any, Dict, Optional

from ..domain.models import (
    CaptureKind,
    ClassificationResult,
    Intent,
    Interaction,
    InteractionId,
    Outcome,
)
from ..execution.captures import info_message, prompt_message
from ..execution.context import StepContext
from ..execution.schemas.state_machine import (
    AwaitingInput,
    BeginChild,
    PassToNext,
    ReplaceFrame,
)
from ..state.models import RootFields

logger = logging.getLogger(__name__)

RESTART_MESSAGE = "If you wish to do anything else, please give me a command."
NOT_UNDERSTOOD_MESSAGE = "Sorry, I didn't get that. Please try asking in a different way."
NLU_NOT_CONFIGURED_MESSAGE = (
    "NOTE: intent recognition is not configured. To enable all capabilities, "
    "add `OPENAI_API_KEY` to the .env file."
)
CANCELLED_CONFIRMATION = 'You have changed your RSVP to "Not Going".'
QUESTION_SENT_CONFIRMATION = "I have successfully sent your question to our company members!"

# Intents that start a child interaction, and the entity keys each child accepts as seed.
CHILD_INTERACTIONS = {
    Intent.RSVP: (InteractionId.REGISTRATION, ("agency", "interests")),
    Intent.CANCEL: (InteractionId.CANCELLATION, ()),
    Intent.QUESTION: (InteractionId.QUESTION, ("question",)),
}


def greeting(ctx: StepContext) -> str:
    return (
        f"Hi, {ctx.user.name or 'there'}! How can I help you? You can say: \n"
        "RSVP, \nCancel my RSVP, \nSee who's attending, \nWhen and where is the event, \n"
        "Add event to my calendar or \nQuestion for company."
    )


def registered_confirmation(ctx: StepContext) -> str:
    return f"You are registered for {ctx.settings.EVENT_NAME}. See you there!"


def informational_reply(ctx: StepContext, intent: Intent) -> Optional[str]:
    """Static answers for intents that need no interaction of their own."""
    if intent == Intent.GET_PARTICIPANTS:
        return f"To see the participants, please click on this link: {ctx.settings.ATTENDEES_URL}"
    if intent == Intent.EVENT_DETAILS:
        return ctx.settings.EVENT_DETAILS
    if intent == Intent.ADD_CALENDAR:
        return f"Please click [here]({ctx.settings.CALENDAR_URL}) to download the .ics calendar file."
    if intent == Intent.GREETINGS:
        return f"Hi, {ctx.user.name or 'there'}! How can I help you today?"
    return None


# ==============================================================================
# Steps
# ==============================================================================

async def intro_step(ctx: StepContext, fields: RootFields, previous: Any):
    if not ctx.nlu_configured:
        ctx.send(info_message(NLU_NOT_CONFIGURED_MESSAGE))
        return PassToNext(previous if isinstance(previous, str) else None)

    # The first utterance of a session already is the answer to the idle prompt.
    if isinstance(previous, str) and previous.strip():
        return PassToNext(previous.strip())

    return AwaitingInput(prompt_message(fields.restart_message or greeting(ctx)))


async def route_step(ctx: StepContext, fields: RootFields, previous: Any):
    if not ctx.nlu_configured:
        return BeginChild(InteractionId.REGISTRATION, {"user": ctx.user})

    classification = await _classify(ctx, previous)
    if classification is None or classification.confidence < ctx.settings.CONFIDENCE_THRESHOLD:
        ctx.send(info_message(NOT_UNDERSTOOD_MESSAGE))
        return PassToNext()

    intent = classification.intent
    if intent in CHILD_INTERACTIONS:
        interaction_id, entity_keys = CHILD_INTERACTIONS[intent]
        seed = _seed(ctx, classification.entities, entity_keys)
        logger.info(f"Routing {intent.value} ({classification.confidence:.2f}) to '{interaction_id.value}'")
        return BeginChild(interaction_id, seed)

    reply = informational_reply(ctx, intent)
    ctx.send(info_message(reply or NOT_UNDERSTOOD_MESSAGE))
    return PassToNext()


async def wrap_up_step(ctx: StepContext, fields: RootFields, previous: Any):
    # None means the child was declined; a Marker means it was interrupted.
    if isinstance(previous, str) and previous:
        if previous == Outcome.CANCELLED.value:
            ctx.send(info_message(CANCELLED_CONFIRMATION))
        elif previous == Outcome.QUESTION_SENT.value:
            ctx.send(info_message(QUESTION_SENT_CONFIRMATION))
        else:
            ctx.send(info_message(registered_confirmation(ctx)))

    return ReplaceFrame({"restart_message": RESTART_MESSAGE})


# ==============================================================================
# Helpers
# ==============================================================================

async def _classify(ctx: StepContext, text: Any) -> Optional[ClassificationResult]:
    if not isinstance(text, str) or not text.strip():
        return None
    try:
        result = await ctx.classifier.classify(text)
    except Exception as e:
        logger.error(f"Intent classification failed: {e}")
        return None
    logger.debug(f"Classified {text!r} as {result.intent.value} ({result.confidence:.2f})")
    return result


def _seed(ctx: StepContext, entities: Dict[str, str], keys) -> Dict[str, Any]:
    seed: Dict[str, Any] = {"user": ctx.user}
    for key in keys:
        value = (entities or {}).get(key)
        if value and value.strip():
            seed[key] = value.strip()
    return seed


ROOT = Interaction(
    id=InteractionId.ROOT,
    title="Main menu",
    fields_model=RootFields,
    steps=[intro_step, route_step, wrap_up_step],
    captures=frozenset({CaptureKind.TEXT}),
)
