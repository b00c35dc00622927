"""Who may manage an event."""

import typing as t
from uuid import UUID

from common.exceptions import ForbiddenError, NotFoundError
from events.models import Event


def require_event_owner(event_id: UUID | str, user: t.Any, queryset: t.Any = None) -> Event:
    """Load an event the user is allowed to manage.

    The creator and the owners and admins of the event's organization can manage it.

    Raises:
        NotFoundError: the event does not exist.
        ForbiddenError: the user cannot manage it.
    """
    queryset = queryset if queryset is not None else Event.objects.all()
    event = queryset.filter(pk=event_id).first()
    if event is None:
        raise NotFoundError("Event not found")
    if not event.can_be_managed_by(user):
        raise ForbiddenError("You don't have permission to access this event")
    return event
