"""
Template file names.

The second extension selects escaping: `.html.jinja2` bodies are
autoescaped, `.txt.jinja2` prompts are rendered verbatim.
"""


class Template:
    """Template names. Use these instead of raw strings."""

    CLASSIFY_INTENT = "classify_intent.txt.jinja2"
    NOTIFY_REGISTRATION = "notify_registration.html.jinja2"
    NOTIFY_CANCELLATION = "notify_cancellation.html.jinja2"
    NOTIFY_QUESTION = "notify_question.html.jinja2"

    ALL = (CLASSIFY_INTENT, NOTIFY_REGISTRATION, NOTIFY_CANCELLATION, NOTIFY_QUESTION)
