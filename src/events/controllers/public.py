"""Endpoints guests reach without an account: invite links, RSVPs and page previews."""

from ninja import Query
from ninja_extra import ControllerBase, api_controller, route

from common.schema import DataResponse
from common.throttling import ApiThrottle, RSVPThrottle
from events import schema
from events.models import MediaAsset, PageTemplate
from events.service import invite_service, page_config, preview, rsvp_service
from notifications.service.payloads import host_name

LOOKUP_EVENT_FIELDS = (
    "id",
    "title",
    "slug",
    "description",
    "start_at",
    "end_at",
    "timezone",
    "venue_name",
    "address",
    "city",
    "country",
    "cover_image_url",
    "status",
    "max_attendees",
)


@api_controller("/rsvp", auth=None, tags=["RSVP"], throttle=RSVPThrottle())
class RSVPController(ControllerBase):
    @route.post("", url_name="submit_rsvp", response=DataResponse[schema.RSVPResultSchema])
    def submit_rsvp(self, payload: schema.RSVPSubmitSchema) -> dict[str, object]:
        """Answer an invitation.

        Guests with an invite link send its `token`. Public events also accept answers
        without an invite: send `event_id` and `guest_email` instead. Answering again
        replaces the earlier answer. A confirmation email is sent either way.
        """
        rsvp, message = rsvp_service.submit_rsvp(payload)
        return {"data": {"rsvp": rsvp, "event": rsvp.event, "message": message}}


@api_controller("", auth=None, tags=["Public"], throttle=ApiThrottle())
class PublicController(ControllerBase):
    @route.get("/invites/lookup", url_name="lookup_invite", response=DataResponse[schema.InviteLookupSchema])
    def lookup_invite(self, params: Query[schema.InviteLookupQuerySchema]) -> dict[str, object]:
        """Resolve an invite link. The first lookup marks the invite as opened."""
        invite, yes_count = invite_service.lookup_invite(params.token)
        event = invite.event
        rsvp = invite_service.existing_rsvp(invite)
        return {
            "data": {
                "invite": {
                    "id": invite.id,
                    "email": invite.email,
                    "name": invite.name,
                    "status": invite.status,
                    "plus_ones_allowed": invite.plus_ones_allowed,
                    "has_responded": rsvp is not None,
                    "existing_rsvp": rsvp,
                },
                "event": {
                    **{field: getattr(event, field) for field in LOOKUP_EVENT_FIELDS},
                    "host_name": host_name(event),
                    "organization_name": event.organization.name if event.organization else None,
                    "yes_count": yes_count,
                },
            }
        }

    @route.get("/preview/{token}", url_name="preview_page", response=DataResponse[schema.PreviewPageSchema])
    def preview_page(self, token: str) -> dict[str, object]:
        """The event and its page as a preview link shows them, published or not."""
        event = preview.resolve_preview_token(token)
        return {
            "data": {
                "event": event,
                "config": page_config.current_config(event).to_document(),
                "template_id": event.template_id or page_config.DEFAULT_TEMPLATE_ID,
                "assets": list(MediaAsset.objects.filter(event=event)),
            }
        }

    @route.get(
        "/page-templates",
        url_name="list_page_templates",
        response=DataResponse[list[schema.PageTemplateSchema]],
    )
    def list_page_templates(self) -> dict[str, object]:
        """Active page templates, by category."""
        return {"data": list(PageTemplate.objects.filter(is_active=True))}
