import typing as t

from django.http import HttpRequest
from django.utils import timezone
from ninja_extra.throttling import BaseThrottle

from common.rate_limit import RATE_LIMITS, RateLimiter, get_client_ip, rate_limiter


class FixedWindowThrottle(BaseThrottle):
    """Throttle requests per client IP with the in-memory fixed-window limiter.

    Subclasses pick a ``scope`` from ``RATE_LIMITS``.
    """

    scope: str = "api"
    limiter: RateLimiter = rate_limiter

    def __init__(self) -> None:
        """Nothing to wait for until a request is refused."""
        self._wait: float | None = None

    def get_ident(self, request: HttpRequest) -> str:
        """Identify the client by its originating IP address."""
        return get_client_ip(request)

    def allow_request(self, request: HttpRequest) -> bool:
        """Count the request and refuse it once the scope's window is exhausted."""
        rule = RATE_LIMITS[self.scope]
        result = self.limiter.check_rule(f"{self.scope}:{self.get_ident(request)}", rule)
        self._wait = None if result.success else max((result.reset_at - timezone.now()).total_seconds(), 0.0)
        return result.success

    def wait(self) -> t.Optional[float]:
        """Seconds until the current window resets."""
        return self._wait


class ApiThrottle(FixedWindowThrottle):
    scope = "api"


class AuthThrottle(FixedWindowThrottle):
    scope = "auth"


class RSVPThrottle(FixedWindowThrottle):
    scope = "rsvp"


class InviteThrottle(FixedWindowThrottle):
    scope = "invites"


class WebhookThrottle(FixedWindowThrottle):
    scope = "webhooks"
