"""Tests for the fire-and-forget commitment commands."""

import logging

import pytest

from rsvp_assistant.domain.models import NotificationKind
from rsvp_assistant.repositories.records import ATTENDEES, InMemoryRecordStore
from rsvp_assistant.services.background import BackgroundRunner
from rsvp_assistant.services.commitments import CommitmentService

from tests.fakes import RecordingNotifier


class BrokenRecordStore(InMemoryRecordStore):
    def upsert(self, key, record):
        raise ConnectionError("database unavailable")


class TestRegisterAttendee:
    @pytest.mark.asyncio
    async def test_returns_immediately_and_stores_in_background(self, commitments, attendees, notifier, runner, user):
        record = commitments.register_attendee(user, agency="Acme", interests="AI")

        assert record.rsvp == "yes"
        assert record.id == "jane@example.com"
        assert runner.pending == 1

        await runner.drain()

        assert attendees.read("jane@example.com") == record.model_dump()
        assert notifier.sent == [(NotificationKind.REGISTRATION, record.model_dump())]

    @pytest.mark.asyncio
    async def test_registering_twice_overwrites_the_record(self, commitments, attendees, runner, user):
        commitments.register_attendee(user, agency="Acme", interests="AI")
        await runner.drain()
        commitments.register_attendee(user, agency="Globex", interests="Robotics")
        await runner.drain()

        assert attendees.read("jane@example.com")["agency"] == "Globex"
        assert len(attendees.all()) == 1

    @pytest.mark.asyncio
    async def test_store_failure_is_logged_and_skips_notification(self, questions, user, caplog):
        notifier = RecordingNotifier()
        runner = BackgroundRunner()
        service = CommitmentService(
            attendees=BrokenRecordStore(ATTENDEES), questions=questions, notifier=notifier, runner=runner
        )

        with caplog.at_level(logging.ERROR):
            service.register_attendee(user, agency="Acme", interests="AI")
            await runner.drain()

        assert notifier.sent == []
        assert "Failed to store registration for jane@example.com" in caplog.text

    @pytest.mark.asyncio
    async def test_notification_failure_keeps_the_stored_record(self, attendees, questions, user, caplog):
        runner = BackgroundRunner()
        service = CommitmentService(
            attendees=attendees, questions=questions, notifier=RecordingNotifier(fail=True), runner=runner
        )

        with caplog.at_level(logging.ERROR):
            service.register_attendee(user, agency="Acme", interests="AI")
            await runner.drain()

        assert attendees.read("jane@example.com")["rsvp"] == "yes"
        assert "could not be delivered" in caplog.text


class TestCancelRsvp:
    @pytest.mark.asyncio
    async def test_existing_record_keeps_its_answers(self, commitments, attendees, notifier, runner, user):
        commitments.register_attendee(user, agency="Acme", interests="AI")
        await runner.drain()

        commitments.cancel_rsvp(user)
        await runner.drain()

        record = attendees.read("jane@example.com")
        assert record["rsvp"] == "no"
        assert record["agency"] == "Acme"
        assert notifier.kinds() == [NotificationKind.REGISTRATION, NotificationKind.CANCELLATION]

    @pytest.mark.asyncio
    async def test_without_a_record_a_not_going_record_is_created(self, commitments, attendees, notifier, runner, user):
        commitments.cancel_rsvp(user)
        await runner.drain()

        record = attendees.read("jane@example.com")
        assert record["rsvp"] == "no"
        assert record["agency"] is None
        assert notifier.kinds() == [NotificationKind.CANCELLATION]


class TestSubmitQuestion:
    @pytest.mark.asyncio
    async def test_each_question_gets_its_own_record(self, commitments, questions, notifier, runner, user):
        first = commitments.submit_question(user, "Is there parking?")
        second = commitments.submit_question(user, "Is lunch included?")
        await runner.drain()

        assert first.id != second.id
        stored = questions.all()
        assert stored[first.id]["question"] == "Is there parking?"
        assert stored[second.id]["email"] == "jane@example.com"
        assert notifier.kinds() == [NotificationKind.QUESTION, NotificationKind.QUESTION]
