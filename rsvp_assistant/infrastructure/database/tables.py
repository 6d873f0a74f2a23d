"""
Database Table Definitions.

This module defines the SQL schema using SQLModel.
We use the 'DBModel' suffix to distinguish these persistence models
from the Pydantic domain models (DialogStack, AttendeeRecord, ...).
"""

from datetime import datetime
from typing import Any, Dict

from sqlalchemy import Column
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel


class DialogSessionDBModel(SQLModel, table=True):
    """
    Persistence model for a conversation's dialog stack.
    Maps 1-to-1 with the 'dialog_sessions' table in Postgres.
    """

    __tablename__ = "dialog_sessions"

    session_id: str = Field(primary_key=True, index=True)

    # Store the entire DialogStack (frames, cursors, field structs) as JSONB.
    state: Dict[str, Any] = Field(sa_column=Column(JSONB, nullable=False))

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class RecordDBModel(SQLModel, table=True):
    """
    Persistence model for committed records (attendees, questions).
    One table, partitioned by 'collection'.
    """

    __tablename__ = "records"

    collection: str = Field(primary_key=True)
    key: str = Field(primary_key=True)

    data: Dict[str, Any] = Field(sa_column=Column(JSONB, nullable=False))

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
