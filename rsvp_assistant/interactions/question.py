"""
Question Submission - forwards a free-text question to the organizers.
"""

import logging
from typing import Any

from ..domain.models import CaptureKind, Interaction, InteractionId, Outcome
from ..execution.captures import prompt_message
from ..execution.context import StepContext
from ..execution.schemas.state_machine import AwaitingInput, EndFrame, PassToNext
from ..state.models import QuestionFields

logger = logging.getLogger(__name__)


async def question_step(ctx: StepContext, fields: QuestionFields, previous: Any):
    if not fields.question:
        return AwaitingInput(prompt_message("What's your question?"))
    return PassToNext(fields.question)


async def confirm_step(ctx: StepContext, fields: QuestionFields, previous: Any):
    fields.question = previous
    return AwaitingInput(
        prompt_message(f"Do you wish to send your question: {fields.question}?"),
        capture=CaptureKind.CONFIRM,
    )


async def final_step(ctx: StepContext, fields: QuestionFields, previous: Any):
    if previous is True:
        user = fields.user or ctx.user
        ctx.commitments.submit_question(user, fields.question)
        logger.info(f"Question confirmed for {user.address}")
        return EndFrame(Outcome.QUESTION_SENT.value)
    return EndFrame()


QUESTION = Interaction(
    id=InteractionId.QUESTION,
    title="Question for the organizers",
    fields_model=QuestionFields,
    steps=[question_step, confirm_step, final_step],
    captures=frozenset({CaptureKind.TEXT, CaptureKind.CONFIRM}),
)
