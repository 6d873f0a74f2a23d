"""
Engine - Dialog Orchestration Layer

The DialogEngine is the deterministic state machine that owns the dialog
stack for the duration of one user turn. It consults the interruption filter,
feeds the turn into the waiting step of the top frame, and then keeps
evaluating step results until the conversation is waiting for the user again.
-----------------------------------------------

The turn loop is a trampoline rather than recursion:
1. A step returning PassToNext, BeginChild, EndFrame or ReplaceFrame moves the
    stack pointers and the loop immediately evaluates the next step (System Turn).
2. A step returning AwaitingInput renders its prompt and the loop yields control
    back to the client (User Turn).
Every step a turn evaluates is recorded as a TransitionMeta on the context.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..domain.models import Interaction, InteractionId, UserIdentity
from ..state.models import (
    DialogFrame,
    DialogStack,
    OutgoingMessage,
    PendingCapture,
    StackInvariantError,
)
from .captures import info_message, prompt_message, recognize
from .context import StepContext
from .interruptions import CANCELLING_TEXT, HELP_TEXT, Interruption, InterruptionFilter
from .schemas.state_machine import (
    AwaitingInput,
    BeginChild,
    EndFrame,
    Marker,
    PassToNext,
    ReplaceFrame,
    StateMachineTransition,
    TransitionMeta,
)

logger = logging.getLogger(__name__)

# Upper bound on steps evaluated in a single turn.
MAX_CHAIN_STEPS = 32


@dataclass
class TurnResult:
    """The outgoing batch of one turn."""

    messages: List[OutgoingMessage] = field(default_factory=list)
    transitions: List[TransitionMeta] = field(default_factory=list)
    interruption: Optional[Interruption] = None

    @property
    def reply(self) -> str:
        return "\n".join(m.text for m in self.messages)


class DialogEngine:
    def __init__(
        self,
        interactions: Dict[InteractionId, Interaction],
        commitments,
        settings: Settings,
        classifier=None,
        interruption_filter: Optional[InterruptionFilter] = None,
    ):
        if InteractionId.ROOT not in interactions:
            raise ValueError("An interaction set without a root interaction cannot start a conversation.")
        self.interactions = interactions
        self.commitments = commitments
        self.settings = settings
        self.classifier = classifier
        self.interruption_filter = interruption_filter or InterruptionFilter()

    async def handle_turn(
        self, stack: DialogStack, user_input: Optional[str], user: UserIdentity
    ) -> TurnResult:
        """
        The Turn Dispatcher. Mutates `stack` in place; the caller persists it.
        """
        ctx = StepContext(
            user=user,
            settings=self.settings,
            commitments=self.commitments,
            classifier=self.classifier,
        )

        if stack.is_empty:
            logger.info(f"Starting root interaction for session {stack.session_id}")
            stack.push(self._new_frame(InteractionId.ROOT, {}))

        interruption = self.interruption_filter.inspect(stack, user_input)

        if interruption == Interruption.HELP:
            logger.info(f"Help requested in session {stack.session_id}")
            ctx.send(prompt_message(HELP_TEXT))

        elif interruption == Interruption.CANCEL:
            logger.info(
                f"Cancel requested in session {stack.session_id}; "
                f"abandoning {stack.depth - 1} nested interaction(s)"
            )
            ctx.send(info_message(CANCELLING_TEXT))
            self._unwind_to_root(stack, ctx)
            await self._run(stack, ctx, Marker.CANCELLED)

        else:
            value = self._accept_input(stack, ctx, user_input)
            if value is not _REJECTED:
                await self._run(stack, ctx, value)

        return TurnResult(
            messages=ctx.outbox,
            transitions=ctx.transitions,
            interruption=interruption,
        )

    # ==========================================================================
    # Turn Loop (Trampoline)
    # ==========================================================================

    async def _run(self, stack: DialogStack, ctx: StepContext, value: Any) -> None:
        for _ in range(MAX_CHAIN_STEPS):
            frame = stack.top()
            if frame is None:
                raise StackInvariantError(f"No frame to run in session {stack.session_id}.")

            interaction = self._interaction(frame.interaction)
            index = frame.step_index
            step = interaction.step_at(index)
            if step is None:
                raise StackInvariantError(
                    f"Step index {index} out of range for '{interaction.id.value}' "
                    f"({len(interaction.steps)} steps)."
                )

            result = await step(ctx, frame.fields, value)

            if isinstance(result, PassToNext):
                frame.step_index = index + 1
                if frame.step_index < len(interaction.steps):
                    self._record(ctx, StateMachineTransition.ADVANCE, frame.interaction, index)
                    value = result.value
                    continue
                # Running off the end of the waterfall ends the frame.
                result = EndFrame(result.value)

            if isinstance(result, AwaitingInput):
                if result.capture not in interaction.captures:
                    raise StackInvariantError(
                        f"'{interaction.id.value}' step {index} awaits undeclared capture "
                        f"'{result.capture.value}'."
                    )
                frame.step_index = index + 1
                frame.pending_capture = PendingCapture(kind=result.capture, prompt=result.prompt)
                ctx.send(result.prompt)
                self._record(ctx, StateMachineTransition.HOLD, frame.interaction, index)
                return

            if isinstance(result, BeginChild):
                frame.step_index = index + 1
                if frame.step_index >= len(interaction.steps):
                    raise StackInvariantError(
                        f"'{interaction.id.value}' begins a child from its last step; "
                        "nothing would receive the child's result."
                    )
                child = self._interaction(result.interaction)
                logger.info(f"Starting '{child.title}' from '{interaction.title}' in session {stack.session_id}")
                stack.push(self._new_frame(result.interaction, result.seed))
                self._record(ctx, StateMachineTransition.PUSH, frame.interaction, index)
                value = result.seed
                continue

            if isinstance(result, ReplaceFrame):
                frame.fields = interaction.fields_model.model_validate(result.seed)
                frame.step_index = 0
                frame.pending_capture = None
                self._record(ctx, StateMachineTransition.RESTART, frame.interaction, index)
                value = result.seed
                continue

            if isinstance(result, EndFrame):
                stack.pop()
                self._record(ctx, StateMachineTransition.POP, frame.interaction, index)
                if stack.is_empty:
                    logger.warning(f"Root interaction ended in session {stack.session_id}; recreating it.")
                    stack.push(self._new_frame(InteractionId.ROOT, {}))
                    value = None
                else:
                    value = result.value
                continue

            raise StackInvariantError(
                f"'{interaction.id.value}' step {index} returned {type(result).__name__}, not a step result."
            )

        raise StackInvariantError(
            f"Turn in session {stack.session_id} exceeded {MAX_CHAIN_STEPS} chained steps."
        )

    # ==========================================================================
    # Stack Helpers
    # ==========================================================================

    def _accept_input(self, stack: DialogStack, ctx: StepContext, user_input: Optional[str]) -> Any:
        """
        Runs the turn's text through the top frame's pending capture.
        A frame with nothing pending (a freshly started root) receives the raw text.
        """
        frame = stack.top()
        pending = frame.pending_capture
        if pending is None:
            return user_input

        outcome = recognize(user_input, pending)
        if not outcome.accepted:
            logger.info(
                f"Rejected answer for '{frame.interaction.value}' "
                f"({pending.kind.value} capture); re-prompting"
            )
            for message in outcome.retry:
                ctx.send(message)
            return _REJECTED

        frame.pending_capture = None
        return outcome.value

    def _unwind_to_root(self, stack: DialogStack, ctx: StepContext) -> None:
        while stack.depth > 1:
            frame = stack.pop()
            self._record(ctx, StateMachineTransition.POP, frame.interaction, frame.step_index)
        root = stack.top()
        if root is None or root.interaction != InteractionId.ROOT:
            raise StackInvariantError(f"Bottom frame of session {stack.session_id} is not the root.")

    def _new_frame(self, interaction_id: InteractionId, seed: Dict[str, Any]) -> DialogFrame:
        interaction = self._interaction(interaction_id)
        return DialogFrame(
            interaction=interaction_id,
            step_index=0,
            fields=interaction.fields_model.model_validate(seed),
        )

    def _interaction(self, interaction_id: InteractionId) -> Interaction:
        interaction = self.interactions.get(interaction_id)
        if interaction is None:
            raise StackInvariantError(f"Interaction '{interaction_id}' is not registered.")
        return interaction

    def _record(
        self,
        ctx: StepContext,
        transition: StateMachineTransition,
        interaction_id: InteractionId,
        step_index: int,
    ) -> None:
        logger.debug(f"{transition.name} {interaction_id.value}[{step_index}]")
        ctx.transitions.append(
            TransitionMeta(
                transition_type=transition,
                interaction=interaction_id,
                step_index=step_index,
            )
        )


# Sentinel for an answer the pending capture did not accept.
_REJECTED = object()
