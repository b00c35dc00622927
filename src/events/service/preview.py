"""Shareable preview links for unpublished event pages."""

from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog
from django.utils import timezone

from common.exceptions import NotFoundError
from common.tokens import generate_token_pair, hash_token
from events.models import Event

logger = structlog.get_logger(__name__)

PREVIEW_TOKEN_LIFETIME = timedelta(days=7)


@dataclass(frozen=True)
class PreviewTokenStatus:
    has_token: bool
    is_expired: bool
    expires_at: datetime | None


def get_preview_token_status(event: Event) -> PreviewTokenStatus:
    expires_at = event.preview_token_expires_at
    return PreviewTokenStatus(
        has_token=bool(event.preview_token_hash),
        is_expired=expires_at is not None and expires_at < timezone.now(),
        expires_at=expires_at,
    )


def create_preview_token(event: Event) -> tuple[str, datetime]:
    """Issue a new preview token, replacing any previous one. Only its digest is stored."""
    token, token_hash = generate_token_pair()
    event.preview_token_hash = token_hash
    event.preview_token_expires_at = timezone.now() + PREVIEW_TOKEN_LIFETIME
    event.save(update_fields=["preview_token_hash", "preview_token_expires_at", "updated_at"])
    logger.info("preview_token_created", event_id=str(event.id))
    return token, event.preview_token_expires_at


def revoke_preview_token(event: Event) -> None:
    event.preview_token_hash = None
    event.preview_token_expires_at = None
    event.save(update_fields=["preview_token_hash", "preview_token_expires_at", "updated_at"])
    logger.info("preview_token_revoked", event_id=str(event.id))


def resolve_preview_token(token: str) -> Event:
    """The event a preview link points at.

    Raises:
        NotFoundError: unknown, revoked or expired token.
    """
    event = (
        Event.objects.select_related("creator", "organization")
        .filter(preview_token_hash=hash_token(token))
        .first()
    )
    if event is None or not event.has_valid_preview_token():
        raise NotFoundError("Preview link is invalid or has expired")
    return event
