from django.test import RequestFactory
from freezegun import freeze_time

from common.rate_limit import RateLimiter
from common.throttling import RSVPThrottle


class _IsolatedRSVPThrottle(RSVPThrottle):
    limiter = RateLimiter()


def test_refuses_past_the_scope_limit(rf: RequestFactory) -> None:
    request = rf.get("/", HTTP_X_FORWARDED_FOR="203.0.113.7")
    with freeze_time("2030-01-01 12:00:00"):
        allowed = [_IsolatedRSVPThrottle().allow_request(request) for _ in range(5)]
        throttle = _IsolatedRSVPThrottle()

        assert allowed == [True] * 5
        assert throttle.allow_request(request) is False
        assert throttle.wait() == 60.0


def test_clients_are_counted_separately(rf: RequestFactory) -> None:
    limiter = RateLimiter()
    throttle = RSVPThrottle()
    throttle.limiter = limiter
    for _ in range(5):
        throttle.allow_request(rf.get("/", HTTP_X_FORWARDED_FOR="203.0.113.7"))

    assert throttle.allow_request(rf.get("/", HTTP_X_FORWARDED_FOR="198.51.100.1"))
    assert throttle.wait() is None
