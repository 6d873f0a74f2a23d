"""
Prompts - Jinja2 templates for the classifier and notification bodies.
"""

from rsvp_assistant.prompts.loader import render
from rsvp_assistant.prompts.templates import Template

__all__ = [
    "Template",
    "render",
]
