"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from datetime import datetime
from typing import Optional, Any

from pydantic import BaseModel, Field


class CreateSessionResponse(BaseModel):
    session_id: str


class UserMessage(BaseModel):
    """One incoming turn as delivered by the channel."""
    text: str = ""
    user_id: str = Field(..., description="Opaque contact address of the sender.")
    display_name: str = ""


class RenderedMessage(BaseModel):
    text: str
    speak: Optional[str] = None
    input_hint: str


class ChatResponse(BaseModel):
    messages: list[RenderedMessage]
    status: str
    active_interaction: Optional[str] = None
    interruption: Optional[str] = None


class FrameRead(BaseModel):
    interaction: str
    title: str
    step_index: int
    awaiting_input: bool
    fields: dict[str, Any]


class SessionRead(BaseModel):
    session_id: str
    active_interaction: Optional[str] = None
    frames: list[FrameRead]
    updated_at: datetime
