from ninja_extra import api_controller, route

from common.authentication import FirebaseAuth
from common.controllers import UserAwareController
from common.schema import DataResponse
from common.throttling import ApiThrottle
from events import schema
from events.service import event_service


@api_controller("/dashboard", auth=FirebaseAuth(), tags=["Dashboard"], throttle=ApiThrottle())
class DashboardController(UserAwareController):
    @route.get("/stats", url_name="dashboard_stats", response=DataResponse[schema.DashboardStatsSchema])
    def stats(self) -> dict[str, dict[str, int]]:
        """Totals over every event you created or manage.

        `response_rate` is the share of invites that were answered, in percent.
        """
        return {"data": event_service.dashboard_stats(self.user())}
