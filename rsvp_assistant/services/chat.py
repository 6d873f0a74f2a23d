"""
Chat Service - Application Orchestration Layer

This service is the entry point for all conversation operations. It orchestrates
the interaction between the Data Layer (Repositories), the Logic Layer (Engine)
and the transport. It ensures that dialog stacks are loaded, processed, and
saved exactly once per turn, and that turns of one session never overlap.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..domain.models import InputHint, InteractionId, UserIdentity
from ..execution.engine import DialogEngine
from ..repositories.session import SessionRepository
from ..state.models import (
    DialogFrame,
    DialogStack,
    OutgoingMessage,
    RootFields,
    StackInvariantError,
)
from .exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)

RESET_MESSAGE = "Sorry, something went wrong. Let's start over."


@dataclass
class ChatTurn:
    """What the transport renders for one incoming turn."""
    messages: List[OutgoingMessage] = field(default_factory=list)
    status: str = "AWAITING_INPUT"
    active_interaction: Optional[str] = None
    interruption: Optional[str] = None

    @property
    def reply(self) -> str:
        return "\n".join(m.text for m in self.messages)


class ChatService:
    def __init__(self, session_repository: SessionRepository, engine: DialogEngine):
        self.session_repo = session_repository
        self.engine = engine
        self._locks: Dict[str, asyncio.Lock] = {}
        self._waiters: Dict[str, int] = {}

    def create_session(self) -> DialogStack:
        """Creates a new empty session."""
        return self.session_repo.create()

    def get_session(self, session_id: str) -> DialogStack:
        session = self.session_repo.get(session_id)
        if not session:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def delete_session(self, session_id: str) -> None:
        if not self.session_repo.delete(session_id):
            raise SessionNotFoundError(f"Session {session_id} not found")

    async def process_message(
        self, session_id: str, user_text: Optional[str], user: UserIdentity
    ) -> ChatTurn:
        """
        The Core Loop:
        1. Load the dialog stack (empty if none persisted)
        2. Execute one engine turn
        3. Save the stack
        4. Return the outgoing batch
        """
        async with self._session_turn(session_id):
            stack = self.session_repo.load(session_id)

            try:
                result = await self.engine.handle_turn(stack, user_text, user)
            except StackInvariantError as e:
                logger.error(f"Dialog stack invariant violated in session {session_id}: {e}")
                return self._reset(stack)

            self.session_repo.save(stack)

        if result.interruption is not None:
            logger.info(f"Turn in session {session_id} was a {result.interruption.name.lower()} interruption")

        top = stack.top()
        return ChatTurn(
            messages=result.messages,
            status="AWAITING_INPUT",
            active_interaction=top.interaction.value if top else None,
            interruption=result.interruption.name.lower() if result.interruption else None,
        )

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @asynccontextmanager
    async def _session_turn(self, session_id: str):
        """
        Holds the session's lock for one turn. The lock is dropped once no
        turn of that session is running or waiting.
        """
        lock = self._locks.setdefault(session_id, asyncio.Lock())
        self._waiters[session_id] = self._waiters.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[session_id] -= 1
            if self._waiters[session_id] == 0:
                del self._waiters[session_id]
                self._locks.pop(session_id, None)

    def _reset(self, stack: DialogStack) -> ChatTurn:
        """
        Drops every frame and starts over from a fresh root frame.
        """
        stack.reset()
        stack.push(DialogFrame(interaction=InteractionId.ROOT, fields=RootFields()))
        self.session_repo.save(stack)
        return ChatTurn(
            messages=[OutgoingMessage(text=RESET_MESSAGE, speak=RESET_MESSAGE, input_hint=InputHint.ACCEPTING)],
            status="ERROR",
            active_interaction=None,
        )
