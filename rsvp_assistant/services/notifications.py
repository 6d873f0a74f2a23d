"""
Notification Service Interface.

Defines the contract for the outbound notification sink that tells the
organizers about registrations, cancellations and questions, plus the
available adapters. Bodies are rendered from Jinja2 templates so every
adapter delivers the same content.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

import httpx

from ..domain.models import NotificationKind
from ..prompts import Template, render

logger = logging.getLogger(__name__)

SUBJECTS = {
    NotificationKind.REGISTRATION: "New User Registration",
    NotificationKind.CANCELLATION: "RSVP Cancelation",
    NotificationKind.QUESTION: "New Question",
}

TEMPLATES = {
    NotificationKind.REGISTRATION: Template.NOTIFY_REGISTRATION,
    NotificationKind.CANCELLATION: Template.NOTIFY_CANCELLATION,
    NotificationKind.QUESTION: Template.NOTIFY_QUESTION,
}


def render_body(kind: NotificationKind, payload: Dict[str, Any]) -> str:
    return render(TEMPLATES[kind], record=payload)


class Notifier(ABC):
    @abstractmethod
    async def notify(self, kind: NotificationKind, payload: Dict[str, Any]) -> None:
        """
        Delivers one notification. May raise; callers treat delivery as
        fire-and-forget and only log failures.
        """
        pass


class LoggingNotifier(Notifier):
    """
    Default sink when no delivery endpoint is configured: the rendered
    notification is written to the log.
    """
    async def notify(self, kind: NotificationKind, payload: Dict[str, Any]) -> None:
        logger.info(f"[{SUBJECTS[kind]}] {render_body(kind, payload)}")


class WebhookNotifier(Notifier):
    """
    POSTs the notification as JSON to a webhook (mail relay, chat channel, ...).
    """
    def __init__(self, url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def notify(self, kind: NotificationKind, payload: Dict[str, Any]) -> None:
        body = {
            "kind": kind.value,
            "subject": SUBJECTS[kind],
            "body": render_body(kind, payload),
            "payload": payload,
        }
        if self._client is not None:
            response = await self._client.post(self.url, json=body, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.url, json=body)
        response.raise_for_status()
        logger.info(f"Notification '{kind.value}' delivered ({response.status_code})")
