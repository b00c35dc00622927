# Event, invite and RSVP fixtures are shared with the events app.
from events.tests.conftest import (  # noqa: F401
    draft_event,
    event,
    invite,
    invite_factory,
    invite_token,
    invite_with_token,
    start_at,
)
