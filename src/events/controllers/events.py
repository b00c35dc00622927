from uuid import UUID

from ninja import Query
from ninja_extra import api_controller, route

from accounts.models import User
from common.authentication import FirebaseAuth, OptionalFirebaseAuth
from common.schema import DataResponse
from common.throttling import ApiThrottle
from events import schema
from events.models import Event
from events.service import event_service

from .base import EventOwnerController


@api_controller("/events", auth=FirebaseAuth(), tags=["Events"], throttle=ApiThrottle())
class EventController(EventOwnerController):
    def _optional_user(self) -> User | None:
        user = self.maybe_user()
        return user if user.is_authenticated else None  # type: ignore[return-value]

    @route.get("", url_name="list_events", auth=OptionalFirebaseAuth(), response=DataResponse[schema.EventListSchema])
    def list_events(self, filters: Query[schema.EventQuerySchema]) -> dict[str, object]:
        """List events, soonest first.

        Signed in, this lists the events you created or manage, filterable by `status` and
        `visibility`. Anonymously, it lists published public events, filterable by `city`.
        """
        events, pagination = event_service.list_events(self._optional_user(), filters)
        return {"data": {"events": events, "pagination": pagination}}

    @route.post("", url_name="create_event", response={201: DataResponse[schema.EventSchema]})
    def create_event(self, payload: schema.EventCreateSchema) -> tuple[int, dict[str, Event]]:
        """Create a draft event. The slug is derived from the title."""
        event = event_service.create_event(self.user(), payload)
        return 201, {"data": event}

    @route.get(
        "/{event_id}",
        url_name="get_event",
        auth=OptionalFirebaseAuth(),
        response=DataResponse[schema.EventDetailSchema],
    )
    def get_event_detail(self, event_id: UUID) -> dict[str, Event]:
        """Event details with invite and RSVP counts.

        Drafts and private events are only visible to the people who manage them.
        """
        return {"data": event_service.get_event_detail(event_id, self._optional_user())}

    @route.patch("/{event_id}", url_name="update_event", response=DataResponse[schema.EventSchema])
    def update_event(self, event_id: UUID, payload: schema.EventUpdateSchema) -> dict[str, Event]:
        """Change the fields that are sent.

        Guests who said yes or maybe to a published event are emailed when its date or
        location changes.
        """
        event = self.get_event(event_id)
        return {"data": event_service.update_event(event, payload)}

    @route.delete("/{event_id}", url_name="delete_event", response={204: None})
    def delete_event(self, event_id: UUID) -> tuple[int, None]:
        """Delete the event with its invites, RSVPs and page history."""
        event_service.delete_event(self.get_event(event_id))
        return 204, None

    @route.post("/{event_id}/publish", url_name="publish_event", response=DataResponse[schema.EventSchema])
    def publish_event(self, event_id: UUID, payload: schema.PublishEventSchema | None = None) -> dict[str, Event]:
        """Publish a draft. Cancelled events and events that already started cannot be published."""
        event = self.get_event(event_id)
        return {"data": event_service.publish_event(event, payload)}

    @route.post("/{event_id}/cancel", url_name="cancel_event", response=DataResponse[schema.EventSchema])
    def cancel_event(self, event_id: UUID) -> dict[str, Event]:
        """Cancel the event. Guests of a published event who said yes or maybe are emailed."""
        event = self.get_event(event_id)
        return {"data": event_service.cancel_event(event)}

    @route.post(
        "/{event_id}/duplicate",
        url_name="duplicate_event",
        response={201: DataResponse[schema.EventSchema]},
    )
    def duplicate_event(self, event_id: UUID) -> tuple[int, dict[str, Event]]:
        """Copy the event's details and page into a new draft titled "Copy of ..."."""
        event = self.get_event(event_id)
        return 201, {"data": event_service.duplicate_event(event, self.user())}
