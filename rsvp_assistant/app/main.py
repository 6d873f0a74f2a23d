import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, status
from fastapi.responses import Response

from ..config import settings
from ..domain.models import UserIdentity
from ..interactions import INTERACTIONS
from ..infrastructure.database.connection import init_db
from ..services.chat import ChatService
from ..services.exceptions import SessionNotFoundError
from .dependencies import get_background_runner, get_chat_service
from .schemas import (
    ChatResponse,
    CreateSessionResponse,
    FrameRead,
    RenderedMessage,
    SessionRead,
    UserMessage,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.DATABASE_URL:
        init_db()
    if not settings.nlu_configured:
        logger.warning("OPENAI_API_KEY is not set; every conversation goes straight to registration.")
    yield
    # Let in-flight registrations and notifications finish.
    await get_background_runner().drain()


app = FastAPI(title="RSVP Assistant", lifespan=lifespan)

# --- Endpoints ---

@app.post(
    "/sessions",
    response_model=CreateSessionResponse,
    status_code=status.HTTP_201_CREATED
)
def create_session(
    service: ChatService = Depends(get_chat_service)
):
    """Starts a new empty session."""
    session = service.create_session()
    return CreateSessionResponse(session_id=session.session_id)


@app.get("/sessions/{session_id}", response_model=SessionRead)
def get_session(
    session_id: str,
    service: ChatService = Depends(get_chat_service)
):
    """
    Retrieves the session resource: the dialog stack, root first.
    """
    try:
        session = service.get_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    active_frame = session.top()

    # Explicitly Map: DialogFrame (State) -> FrameRead (API)
    frames_dto = [
        FrameRead(
            interaction=frame.interaction.value,
            title=INTERACTIONS[frame.interaction].title,
            step_index=frame.step_index,
            awaiting_input=frame.awaiting_input,
            fields=frame.fields.model_dump(mode="json", exclude={"kind"}),
        )
        for frame in session.frames
    ]

    return SessionRead(
        session_id=session.session_id,
        active_interaction=active_frame.interaction.value if active_frame else None,
        frames=frames_dto,
        updated_at=session.updated_at,
    )


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    service: ChatService = Depends(get_chat_service)
):
    """
    Deletes a session. Returns 204 No Content on success.
    """
    try:
        service.delete_session(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found")

    # For 204, we must explicitly return a Response object with no content
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/sessions/{session_id}/messages", response_model=ChatResponse)
async def handle_message(
    session_id: str,
    message: UserMessage,
    service: ChatService = Depends(get_chat_service)
):
    user = UserIdentity(address=message.user_id, display_name=message.display_name)
    turn = await service.process_message(session_id, message.text, user)

    # Explicitly Map: ChatTurn (Service) -> ChatResponse (API)
    return ChatResponse(
        messages=[
            RenderedMessage(text=m.text, speak=m.speak, input_hint=m.input_hint.value)
            for m in turn.messages
        ],
        status=turn.status,
        active_interaction=turn.active_interaction,
        interruption=turn.interruption,
    )
