from django.conf import settings
from django.http import HttpRequest
from django.utils import timezone
from ninja_extra import NinjaExtraAPI

from accounts.controllers.auth import AuthController
from analytics.controllers import EventAnalyticsController, TrackingController
from common.schema import VersionResponse
from common.throttling import ApiThrottle
from events.controllers import EVENT_CONTROLLERS
from notifications.controllers.cron import CronController
from notifications.controllers.event_emails import EventEmailsController
from notifications.controllers.webhooks import WebhookController

from . import health
from .exception_handlers import EXCEPTION_HANDLERS
from .schema import HealthSchema

api = NinjaExtraAPI(
    title="EventsFixer API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"EventsFixer API {settings.VERSION}",
    app_name=f"eventsfixer-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[ApiThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse}, url_name="version")
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/health", tags=["Healthcheck"], response={200: HealthSchema, 503: HealthSchema}, url_name="health")
def healthcheck(request: HttpRequest) -> tuple[int, dict[str, object]]:
    """Check that the API can reach its database.

    `degraded` means the database answered slower than one second; the status code is still 200.
    An unreachable database answers `unhealthy` with 503.
    """
    database = health.check_database()
    body = {
        "status": database.status,
        "timestamp": timezone.now(),
        "version": settings.VERSION,
        "checks": {"database": database},
    }
    return (503 if database.status == "unhealthy" else 200), body


api.register_controllers(
    # Account controllers
    AuthController,
    # Event controllers
    *EVENT_CONTROLLERS,
    # Notification controllers
    EventEmailsController,
    WebhookController,
    CronController,
    # Analytics controllers
    TrackingController,
    EventAnalyticsController,
)

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
