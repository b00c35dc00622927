from uuid import UUID

from ninja import Query
from ninja_extra import ControllerBase, api_controller, route

from analytics import calculations, schema, service
from common.authentication import FirebaseAuth
from common.schema import DataResponse
from common.throttling import ApiThrottle
from events.controllers.base import EventOwnerController


@api_controller("/analytics", auth=None, tags=["Analytics"], throttle=ApiThrottle())
class TrackingController(ControllerBase):
    @route.post("/track", url_name="track_analytics_event", response={201: DataResponse[schema.TrackedEventSchema]})
    def track(self, payload: schema.TrackEventSchema) -> tuple[int, dict[str, object]]:
        """Record a visit or RSVP form interaction on an event page. No account needed."""
        tracked = service.track_event(payload)
        return 201, {"data": {"id": tracked.id}}


@api_controller("/events/{event_id}/analytics", auth=FirebaseAuth(), tags=["Analytics"], throttle=ApiThrottle())
class EventAnalyticsController(EventOwnerController):
    @route.get("/snapshot", url_name="analytics_snapshot", response=DataResponse[schema.AnalyticsSnapshotSchema])
    def snapshot(self, event_id: UUID) -> dict[str, calculations.AnalyticsSnapshot]:
        """Answers, open and response rates, expected attendance and days left."""
        return {"data": service.snapshot(self.get_event(event_id))}

    @route.get("/funnel", url_name="analytics_funnel", response=DataResponse[schema.FunnelSchema])
    def funnel(self, event_id: UUID, params: Query[schema.FunnelQuerySchema]) -> dict[str, calculations.FunnelData]:
        """How many invitees got from one step to the next, from invite to answer."""
        return {"data": service.funnel(self.get_event(event_id), extended=params.extended)}

    @route.get("/velocity", url_name="analytics_velocity", response=DataResponse[schema.VelocitySchema])
    def velocity(self, event_id: UUID) -> dict[str, calculations.VelocityData]:
        """Answers per day over the last 30 days and this week's momentum."""
        return {"data": service.velocity(self.get_event(event_id))}
