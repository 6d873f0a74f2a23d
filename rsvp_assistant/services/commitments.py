"""
Commitment Service - Side effects of confirmed interactions.

When a waterfall's final step is confirmed it hands its collected record to
this service and ends immediately. Persistence and notification run in the
background: their failures are logged here and never reach the conversation.
"""

import asyncio
import logging
import uuid
from typing import Optional

from ..domain.models import (
    AttendeeRecord,
    NotificationKind,
    QuestionRecord,
    UserIdentity,
)
from ..repositories.records import RecordStore
from .background import BackgroundRunner
from .notifications import Notifier

logger = logging.getLogger(__name__)


class CommitmentService:
    def __init__(
        self,
        attendees: RecordStore,
        questions: RecordStore,
        notifier: Notifier,
        runner: Optional[BackgroundRunner] = None,
    ):
        self.attendees = attendees
        self.questions = questions
        self.notifier = notifier
        self.runner = runner or BackgroundRunner()

    # ==========================================================================
    # Commands (called from steps, return immediately)
    # ==========================================================================

    def register_attendee(
        self, user: UserIdentity, agency: Optional[str], interests: Optional[str]
    ) -> AttendeeRecord:
        record = AttendeeRecord(
            id=user.record_key,
            email=user.address,
            name=user.name,
            agency=agency,
            interests=interests,
            rsvp="yes",
        )
        self.runner.spawn(self._register(record), name=f"register:{record.id}")
        return record

    def cancel_rsvp(self, user: UserIdentity) -> None:
        self.runner.spawn(self._cancel(user), name=f"cancel:{user.record_key}")

    def submit_question(self, user: UserIdentity, question: str) -> QuestionRecord:
        record = QuestionRecord(id=str(uuid.uuid4()), email=user.address, question=question)
        self.runner.spawn(self._submit_question(record), name=f"question:{record.id}")
        return record

    # ==========================================================================
    # Background work
    # ==========================================================================

    async def _register(self, record: AttendeeRecord) -> None:
        payload = record.model_dump()
        try:
            await asyncio.to_thread(self.attendees.upsert, record.id, payload)
            logger.info(f"Stored registration for {record.email}")
        except Exception:
            logger.exception(f"Failed to store registration for {record.email}")
            return
        await self._notify(NotificationKind.REGISTRATION, payload)

    async def _cancel(self, user: UserIdentity) -> None:
        key = user.record_key
        try:
            existing = await asyncio.to_thread(self.attendees.read, key)
            if existing is None:
                # Nothing registered yet; still record the "not going" answer.
                payload = AttendeeRecord(
                    id=key, email=user.address, name=user.name, rsvp="no"
                ).model_dump()
                await asyncio.to_thread(self.attendees.upsert, key, payload)
            else:
                payload = {**existing, "rsvp": "no"}
                await asyncio.to_thread(self.attendees.replace, key, payload)
            logger.info(f"Stored RSVP cancellation for {user.address}")
        except Exception:
            logger.exception(f"Failed to store RSVP cancellation for {user.address}")
            return
        await self._notify(NotificationKind.CANCELLATION, payload)

    async def _submit_question(self, record: QuestionRecord) -> None:
        payload = record.model_dump()
        try:
            await asyncio.to_thread(self.questions.upsert, record.id, payload)
            logger.info(f"Stored question from {record.email}")
        except Exception:
            logger.exception(f"Failed to store question from {record.email}")
            return
        await self._notify(NotificationKind.QUESTION, payload)

    async def _notify(self, kind: NotificationKind, payload: dict) -> None:
        try:
            await self.notifier.notify(kind, payload)
        except Exception:
            logger.exception(f"Notification '{kind.value}' could not be delivered")
