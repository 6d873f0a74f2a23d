"""
Jinja2 rendering for the classifier prompt and the organizer notifications.

Templates ship inside the package and are checked when this module is
imported, so a missing file fails at startup rather than on the first
registration. Undefined variables raise instead of rendering as blanks.
"""

from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from .templates import Template


@lru_cache(maxsize=1)
def _get_environment() -> Environment:
    return Environment(
        loader=PackageLoader("rsvp_assistant.prompts", "templates"),
        autoescape=select_autoescape(enabled_extensions=("html.jinja2",), default=False),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _check_templates() -> None:
    available = set(_get_environment().list_templates())
    missing = [name for name in Template.ALL if name not in available]
    if missing:
        raise FileNotFoundError(f"Templates missing from package: {', '.join(missing)}")


_check_templates()


def render(template_name: str, **context) -> str:
    """
    Renders one of the `Template` names with the given variables.
    """
    return _get_environment().get_template(template_name).render(**context)
