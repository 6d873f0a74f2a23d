"""Tests for the dialog stack, frames and user identity."""

import pytest

from rsvp_assistant.domain.models import CaptureKind, InteractionId, UserIdentity
from rsvp_assistant.execution.captures import prompt_message
from rsvp_assistant.state.models import (
    DialogFrame,
    DialogStack,
    PendingCapture,
    QuestionFields,
    RegistrationFields,
    RootFields,
    StackInvariantError,
)


def _root() -> DialogFrame:
    return DialogFrame(interaction=InteractionId.ROOT, fields=RootFields())


class TestDialogStack:
    def test_push_pop_top_follow_call_stack_order(self):
        stack = DialogStack(session_id="s1")
        root = stack.push(_root())
        child = stack.push(
            DialogFrame(interaction=InteractionId.REGISTRATION, fields=RegistrationFields())
        )

        assert stack.depth == 2
        assert stack.top() is child
        assert stack.pop() is child
        assert stack.top() is root

    def test_empty_stack_has_no_top(self):
        stack = DialogStack(session_id="s1")

        assert stack.is_empty
        assert stack.top() is None

    def test_pop_on_empty_stack_is_an_invariant_violation(self):
        stack = DialogStack(session_id="s1")

        with pytest.raises(StackInvariantError):
            stack.pop()

    def test_serialized_stack_restores_typed_fields(self):
        """
        GIVEN a stack with a root and a question frame awaiting confirmation
        WHEN it is dumped to JSON and validated back
        THEN every frame keeps its own field struct, cursor and pending capture
        """
        user = UserIdentity(address="jane@example.com", display_name="Jane")
        stack = DialogStack(session_id="s1")
        stack.push(DialogFrame(interaction=InteractionId.ROOT, step_index=2, fields=RootFields()))
        stack.push(
            DialogFrame(
                interaction=InteractionId.QUESTION,
                step_index=2,
                fields=QuestionFields(user=user, question="Is there parking?"),
                pending_capture=PendingCapture(
                    kind=CaptureKind.CONFIRM,
                    prompt=prompt_message("Do you wish to send your question: Is there parking?"),
                ),
            )
        )

        restored = DialogStack.model_validate(stack.model_dump(mode="json"))

        top = restored.top()
        assert isinstance(top.fields, QuestionFields)
        assert top.fields.question == "Is there parking?"
        assert top.fields.user == user
        assert top.step_index == 2
        assert top.awaiting_input
        assert top.pending_capture.kind == CaptureKind.CONFIRM
        assert isinstance(restored.frames[0].fields, RootFields)
        assert not restored.frames[0].awaiting_input


class TestUserIdentity:
    def test_parenthetical_suffix_is_stripped_from_name(self):
        user = UserIdentity(address="jane@example.com", display_name="Jane Doe (Contractor)")

        assert user.name == "Jane Doe"

    def test_display_name_without_parenthesis_is_used_unmodified(self):
        user = UserIdentity(address="jane@example.com", display_name="Jane Doe")

        assert user.name == "Jane Doe"

    def test_record_key_is_the_contact_address(self):
        user = UserIdentity(address="jane@example.com", display_name="Jane Doe (Contractor)")

        assert user.record_key == "jane@example.com"
