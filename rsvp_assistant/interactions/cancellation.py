"""
Cancellation - RSVP "no" waterfall.
"""

import logging
from typing import Any

from ..domain.models import CaptureKind, Interaction, InteractionId, Outcome
from ..execution.captures import prompt_message
from ..execution.context import StepContext
from ..execution.schemas.state_machine import AwaitingInput, EndFrame
from ..state.models import CancellationFields

logger = logging.getLogger(__name__)


async def confirm_step(ctx: StepContext, fields: CancellationFields, previous: Any):
    return AwaitingInput(
        prompt_message("Are you sure you want to cancel your RSVP?"),
        capture=CaptureKind.CONFIRM,
    )


async def final_step(ctx: StepContext, fields: CancellationFields, previous: Any):
    if previous is True:
        user = fields.user or ctx.user
        ctx.commitments.cancel_rsvp(user)
        logger.info(f"RSVP cancellation confirmed for {user.address}")
        return EndFrame(Outcome.CANCELLED.value)
    return EndFrame()


CANCELLATION = Interaction(
    id=InteractionId.CANCELLATION,
    title="Cancel RSVP",
    fields_model=CancellationFields,
    steps=[confirm_step, final_step],
    captures=frozenset({CaptureKind.CONFIRM}),
)
