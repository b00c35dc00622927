import typing as t

import structlog
from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest
from ninja.security import HttpBearer

from accounts.service import firebase

logger = structlog.get_logger(__name__)


class FirebaseAuth(HttpBearer):
    """Bearer authentication with Firebase ID tokens.

    The token is verified against the configured Firebase project and the matching
    local user is created or refreshed from its claims. ``request.user`` is set to
    that user before the view handler runs.

    Usage:
        @api_controller("/events", auth=FirebaseAuth())
        class EventController:
            ...
    """

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        """Verify the token and return the local user, or None to reject the request."""
        try:
            claims = firebase.verify_id_token(token)
        except ValueError as e:
            logger.info("firebase_token_rejected", error=str(e))
            return None
        user = firebase.sync_user(claims)
        request.user = user
        structlog.contextvars.bind_contextvars(user_id=str(user.id))
        return user


class OptionalFirebaseAuth(FirebaseAuth):
    """Firebase authentication that lets anonymous requests through.

    - With an ``Authorization`` header the token must be valid.
    - Without it, ``request.user`` is an ``AnonymousUser`` and the handler runs anyway.
    """

    def __call__(self, request: HttpRequest) -> t.Any | None:
        """Overrides HttpBearer __call__ to provide optional auth."""
        if not request.headers.get(self.header):
            request.user = AnonymousUser()
            return request.user
        return super().__call__(request)
