from uuid import UUID

from django.http import HttpResponse
from ninja import Query
from ninja_extra import api_controller, route

from common.authentication import FirebaseAuth
from common.schema import DataResponse
from common.throttling import ApiThrottle, InviteThrottle
from events import schema
from events.service import invite_service, rsvp_service

from .base import EventOwnerController


def _created(entry: invite_service.CreatedInvite) -> dict[str, object]:
    invite = entry.invite
    return {
        "id": invite.id,
        "email": invite.email,
        "name": invite.name,
        "status": invite.status,
        "plus_ones_allowed": invite.plus_ones_allowed,
        "created_at": invite.created_at,
        "token": entry.token,
        "email_queued": entry.email_queued,
    }


@api_controller("/events/{event_id}", auth=FirebaseAuth(), tags=["Invites"], throttle=ApiThrottle())
class EventGuestsController(EventOwnerController):
    """The guest list of an event: invites, answers and the CSV export."""

    @route.get("/invites", url_name="list_invites", response=DataResponse[schema.InviteListSchema])
    def list_invites(self, event_id: UUID, filters: Query[schema.InviteQuerySchema]) -> dict[str, object]:
        """Invites, newest first, each with its RSVP if the guest answered."""
        event = self.get_event(event_id)
        invites, pagination = invite_service.list_invites(event, filters)
        return {"data": {"invites": invites, "pagination": pagination}}

    @route.post(
        "/invites",
        url_name="create_invites",
        throttle=InviteThrottle(),
        response={
            201: DataResponse[schema.SingleInviteCreatedSchema] | DataResponse[schema.BulkInviteCreatedSchema],
        },
    )
    def create_invites(self, event_id: UUID, payload: schema.InviteCreateSchema) -> tuple[int, dict[str, object]]:
        """Invite one guest (`email`) or up to 100 at once (`invites`).

        The raw invite tokens are only returned here. With `send_immediately` the
        invitation emails go out right away.
        """
        event = self.get_event(event_id)
        created = invite_service.create_invites(event, payload)
        if not payload.is_bulk:
            return 201, {"data": _created(created[0])}
        return 201, {
            "data": {
                "invites": [_created(entry) for entry in created],
                "count": len(created),
                "emails_queued": sum(1 for entry in created if entry.email_queued),
            }
        }

    @route.get("/invites/export", url_name="export_invites", response={200: None})
    def export_invites(self, event_id: UUID, filters: Query[schema.InviteExportQuerySchema]) -> HttpResponse:
        """Download the guest list as CSV.

        `filter` is one of `all`, `attending`, `pending`, `responded` or `not_attending`.
        """
        event = self.get_event(event_id)
        content = invite_service.export_invites_csv(event, filters.filter)
        response = HttpResponse(content, content_type="text/csv; charset=utf-8")
        filename = invite_service.export_filename(event, filters.filter)
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response

    @route.get("/rsvps", url_name="list_rsvps", response=DataResponse[schema.RSVPListSchema])
    def list_rsvps(self, event_id: UUID, filters: Query[schema.RSVPQuerySchema]) -> dict[str, object]:
        """Answers, most recent first, with guest totals per response."""
        event = self.get_event(event_id)
        rsvps, stats, pagination = rsvp_service.list_rsvps(event, filters)
        return {"data": {"rsvps": rsvps, "stats": stats, "pagination": pagination}}
