"""
Registration - RSVP "yes" waterfall.

agency -> interests -> confirm -> commit. Agency and interests are skipped
when the frame was seeded with them.
"""

import logging
from typing import Any

from ..domain.models import CaptureKind, Interaction, InteractionId, Outcome
from ..execution.captures import prompt_message
from ..execution.context import StepContext
from ..execution.schemas.state_machine import AwaitingInput, EndFrame, PassToNext
from ..state.models import RegistrationFields

logger = logging.getLogger(__name__)


async def agency_step(ctx: StepContext, fields: RegistrationFields, previous: Any):
    if not fields.agency:
        return AwaitingInput(prompt_message("What's your agency?"))
    return PassToNext(fields.agency)


async def interests_step(ctx: StepContext, fields: RegistrationFields, previous: Any):
    fields.agency = previous
    if not fields.interests:
        return AwaitingInput(
            prompt_message("What topics would you like to see?", speak="What are your topics of interest?")
        )
    return PassToNext(fields.interests)


async def confirm_step(ctx: StepContext, fields: RegistrationFields, previous: Any):
    fields.interests = previous
    text = (
        f"Please confirm your RSVP, Your agency is: {fields.agency} "
        f"and topics of interest are: {fields.interests}. Is this correct?"
    )
    return AwaitingInput(prompt_message(text), capture=CaptureKind.CONFIRM)


async def final_step(ctx: StepContext, fields: RegistrationFields, previous: Any):
    if previous is True:
        user = fields.user or ctx.user
        ctx.commitments.register_attendee(user, agency=fields.agency, interests=fields.interests)
        logger.info(f"Registration confirmed for {user.address}")
        return EndFrame(Outcome.REGISTERED.value)
    return EndFrame()


REGISTRATION = Interaction(
    id=InteractionId.REGISTRATION,
    title="RSVP",
    fields_model=RegistrationFields,
    steps=[agency_step, interests_step, confirm_step, final_step],
    captures=frozenset({CaptureKind.TEXT, CaptureKind.CONFIRM}),
)
