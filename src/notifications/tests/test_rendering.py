import pytest

from notifications.enums import EmailTemplate
from notifications.models import EmailOutbox
from notifications.service.rendering import render_email, template_names

PAYLOAD = {
    "event_title": "Summer Party",
    "event_date": "Saturday, June 14, 2026",
    "event_time": "6:00 PM",
    "event_location": "The Barn, 1 Farm Road, Vienna",
    "host_name": "Hannah Host",
    "guest_name": "Gina",
    "response": "YES",
    "guest_count": 2,
    "rsvp_url": "https://eventsfixer.test/rsvp/abc",
    "event_url": "https://eventsfixer.test/events/summer-party",
    "verify_url": "https://eventsfixer.test/verify?token=abc",
    "changes": ["New date: Sunday, June 15, 2026"],
}


def test_template_names() -> None:
    assert template_names(EmailTemplate.NO_RESPONSE_REMINDER) == (
        "notifications/email/no_response_reminder.txt",
        "notifications/email/no_response_reminder.html",
    )


@pytest.mark.parametrize("template", EmailTemplate.values)
def test_every_template_renders(template: str) -> None:
    email = EmailOutbox(template=template, to_email="gina@example.com", subject="Subject line", payload=PAYLOAD)

    rendered = render_email(email)

    assert rendered.text.strip()
    assert "<html" in rendered.html


def test_invite_mentions_the_event_and_link() -> None:
    email = EmailOutbox(template=EmailTemplate.INVITE, to_email="gina@example.com", subject="s", payload=PAYLOAD)

    rendered = render_email(email)

    assert "Hi Gina," in rendered.text
    assert "Hannah Host has invited you to Summer Party." in rendered.text
    assert "https://eventsfixer.test/rsvp/abc" in rendered.html
