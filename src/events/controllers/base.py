from uuid import UUID

from common.controllers import UserAwareController
from events.models import Event
from events.permissions import require_event_owner


class EventOwnerController(UserAwareController):
    """Base controller for the endpoints that manage a single event.

    Subclasses should be decorated with @api_controller to register routes.
    """

    def get_event(self, event_id: UUID) -> Event:
        """The event, if the current user may manage it."""
        return require_event_owner(event_id, self.user())
