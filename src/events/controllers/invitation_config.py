from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import FirebaseAuth
from common.schema import DataResponse
from common.throttling import ApiThrottle
from events import schema
from events.models import InvitationConfig
from events.service import invitation_config

from .base import EventOwnerController


@api_controller(
    "/events/{event_id}/invitation-config",
    auth=FirebaseAuth(),
    tags=["Invitation"],
    throttle=ApiThrottle(),
)
class InvitationConfigController(EventOwnerController):
    """Look and wording of the animated invitation guests open from their invite link."""

    @route.get(
        "",
        url_name="get_invitation_config",
        response=DataResponse[schema.InvitationConfigSchema | None],
    )
    def get_config(self, event_id: UUID) -> dict[str, InvitationConfig | None]:
        """The event's invitation config, or `null` when none was saved yet."""
        event = self.get_event(event_id)
        return {"data": invitation_config.get_invitation_config(event)}

    @route.put("", url_name="update_invitation_config", response=DataResponse[schema.InvitationConfigSchema])
    def update_config(
        self, event_id: UUID, payload: schema.InvitationConfigInputSchema
    ) -> dict[str, InvitationConfig]:
        """Create or replace the invitation config. Empty texts are cleared."""
        event = self.get_event(event_id)
        return {"data": invitation_config.upsert_invitation_config(event, payload)}

    @route.delete("", url_name="delete_invitation_config", response={204: None})
    def delete_config(self, event_id: UUID) -> tuple[int, None]:
        event = self.get_event(event_id)
        invitation_config.delete_invitation_config(event)
        return 204, None
