import typing as t
from dataclasses import dataclass

from django.conf import settings
from django.template.loader import render_to_string

from notifications.models import EmailOutbox


@dataclass(frozen=True)
class RenderedEmail:
    text: str
    html: str


def template_names(template: str) -> tuple[str, str]:
    """The text and HTML template paths for an outbox template."""
    base = f"notifications/email/{template.lower()}"
    return f"{base}.txt", f"{base}.html"


def render_email(email: EmailOutbox) -> RenderedEmail:
    """Render the plain text and HTML bodies of an outbox row from its payload."""
    context: dict[str, t.Any] = {
        **(email.payload or {}),
        "subject": email.subject,
        "site_url": settings.BASE_URL,
    }
    text_template, html_template = template_names(email.template)
    return RenderedEmail(
        text=render_to_string(text_template, context),
        html=render_to_string(html_template, context),
    )
