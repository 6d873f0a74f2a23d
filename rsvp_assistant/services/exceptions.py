"""
Service Layer Exceptions

Custom exceptions for the ChatService and related orchestration logic.
"""


class SessionNotFoundError(Exception):
    """Raised when a session resource is read or deleted but does not exist."""
    pass
