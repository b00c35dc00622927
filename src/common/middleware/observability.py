"""Request context enrichment for structured logs."""

import typing as t
import uuid

import structlog
from django.http import HttpRequest, HttpResponse

from common.rate_limit import get_client_ip


class StructlogContextMiddleware:
    """Binds request metadata to structlog for the duration of the request.

    Every log event emitted while handling the request carries the request id,
    method, path and client IP. The request id is echoed back in ``X-Request-ID``.
    """

    def __init__(self, get_response: t.Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Bind context, handle the request, clear context."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.path,
            ip_address=get_client_ip(request),
        )

        response = self.get_response(request)

        response["X-Request-ID"] = request_id
        structlog.contextvars.clear_contextvars()
        return response
