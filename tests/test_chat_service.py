"""Tests for ChatService: persistence per turn, isolation and recovery."""

import asyncio

import pytest

from rsvp_assistant.domain.models import InteractionId, UserIdentity
from rsvp_assistant.execution.engine import DialogEngine
from rsvp_assistant.interactions import INTERACTIONS
from rsvp_assistant.services.chat import RESET_MESSAGE, ChatService
from rsvp_assistant.services.exceptions import SessionNotFoundError
from rsvp_assistant.state.models import DialogFrame, DialogStack, RootFields

from tests.fakes import DEFAULT_INTENTS, PausingIntentClassifier


class TestSessionLifecycle:
    def test_created_session_is_empty_until_first_turn(self, chat_service):
        session = chat_service.create_session()

        stored = chat_service.get_session(session.session_id)
        assert stored.is_empty

    def test_unknown_session_raises(self, chat_service):
        with pytest.raises(SessionNotFoundError):
            chat_service.get_session("missing")

    def test_delete_session(self, chat_service):
        session = chat_service.create_session()

        chat_service.delete_session(session.session_id)

        with pytest.raises(SessionNotFoundError):
            chat_service.get_session(session.session_id)
        with pytest.raises(SessionNotFoundError):
            chat_service.delete_session(session.session_id)


class TestProcessMessage:
    @pytest.mark.asyncio
    async def test_first_turn_of_unknown_session_creates_it(self, chat_service, session_repository, user):
        turn = await chat_service.process_message("fresh", "rsvp", user)

        assert turn.status == "AWAITING_INPUT"
        assert turn.active_interaction == InteractionId.REGISTRATION.value
        stack = session_repository.get("fresh")
        assert [f.interaction for f in stack.frames] == [InteractionId.ROOT, InteractionId.REGISTRATION]

    @pytest.mark.asyncio
    async def test_sessions_do_not_share_state(self, chat_service, user):
        other = UserIdentity(address="sam@example.com", display_name="Sam")

        await chat_service.process_message("a", "rsvp", user)
        turn = await chat_service.process_message("b", "Acme", other)

        assert turn.active_interaction == InteractionId.ROOT.value
        assert chat_service.get_session("a").top().interaction == InteractionId.REGISTRATION

    @pytest.mark.asyncio
    async def test_concurrent_turns_of_one_session_are_serialized(self, session_repository, commitments, settings, user):
        """
        GIVEN a classifier that yields to the event loop mid-turn
        WHEN two turns for the same session are submitted at once
        THEN the second turn waits and sees the stack saved by the first
        """
        engine = DialogEngine(
            interactions=INTERACTIONS,
            commitments=commitments,
            settings=settings,
            classifier=PausingIntentClassifier(dict(DEFAULT_INTENTS)),
        )
        chat_service = ChatService(session_repository=session_repository, engine=engine)

        first, second = await asyncio.gather(
            chat_service.process_message("s", "rsvp", user),
            chat_service.process_message("s", "Acme", user),
        )

        assert first.reply == "What's your agency?"
        assert second.reply == "What topics would you like to see?"
        assert session_repository.get("s").top().fields.agency == "Acme"

    @pytest.mark.asyncio
    async def test_other_sessions_are_not_blocked_by_a_running_turn(self, session_repository, commitments, settings, user):
        engine = DialogEngine(
            interactions=INTERACTIONS,
            commitments=commitments,
            settings=settings,
            classifier=PausingIntentClassifier(dict(DEFAULT_INTENTS)),
        )
        chat_service = ChatService(session_repository=session_repository, engine=engine)

        first, second = await asyncio.gather(
            chat_service.process_message("a", "rsvp", user),
            chat_service.process_message("b", "rsvp", user),
        )

        assert first.reply == second.reply == "What's your agency?"

    @pytest.mark.asyncio
    async def test_session_locks_are_released_after_turns_finish(self, chat_service, user):
        """
        GIVEN many sessions that each sent turns, some concurrently
        WHEN all turns have finished
        THEN no per-session lock is retained
        """
        for n in range(50):
            await chat_service.process_message(f"session-{n}", "rsvp", user)
        await asyncio.gather(*(chat_service.process_message("shared", "hello", user) for _ in range(5)))

        assert chat_service._locks == {}
        assert chat_service._waiters == {}

    @pytest.mark.asyncio
    async def test_session_lock_is_released_after_an_invariant_reset(self, chat_service, session_repository, user):
        broken = DialogStack(session_id="s")
        broken.push(DialogFrame(interaction=InteractionId.ROOT, step_index=42, fields=RootFields()))
        session_repository.save(broken)

        await chat_service.process_message("s", "hello", user)

        assert chat_service._locks == {}

    @pytest.mark.asyncio
    async def test_interruption_is_reported_on_the_turn(self, chat_service, user):
        await chat_service.process_message("s", "rsvp", user)

        helped = await chat_service.process_message("s", "help", user)
        cancelled = await chat_service.process_message("s", "cancel", user)
        plain = await chat_service.process_message("s", "hello", user)

        assert helped.interruption == "help"
        assert cancelled.interruption == "cancel"
        assert plain.interruption is None

    @pytest.mark.asyncio
    async def test_invariant_violation_resets_to_a_fresh_root(self, chat_service, session_repository, user):
        broken = DialogStack(session_id="s")
        broken.push(DialogFrame(interaction=InteractionId.ROOT, step_index=42, fields=RootFields()))
        session_repository.save(broken)

        turn = await chat_service.process_message("s", "hello", user)

        assert turn.status == "ERROR"
        assert turn.reply == RESET_MESSAGE
        stack = session_repository.get("s")
        assert stack.depth == 1
        assert stack.top().interaction == InteractionId.ROOT
        assert stack.top().step_index == 0

        # The next turn is handled normally from the fresh root.
        turn = await chat_service.process_message("s", "rsvp", user)
        assert turn.reply == "What's your agency?"
