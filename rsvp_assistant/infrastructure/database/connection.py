"""
Database Connection Manager.

This module handles the low-level details of connecting to PostgreSQL.
It exposes the SQLModel engine which is used by the Postgres repositories.
The engine is created on first use so that the in-memory configuration
never needs a database URL.
"""

from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from ...config import settings


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    if not settings.DATABASE_URL:
        raise RuntimeError("DATABASE_URL is not configured.")
    # echo=False in production to avoid leaking sensitive data in logs
    return create_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)


def init_db():
    """
    Idempotent initialization.
    Creates tables if they do not exist.
    """
    # Registers the table models on SQLModel.metadata.
    from . import tables  # noqa: F401

    SQLModel.metadata.create_all(get_engine())
