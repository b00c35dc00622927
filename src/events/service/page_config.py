"""Page config versioning: migration, validation, diffing and the version history."""

import typing as t
from dataclasses import dataclass
from uuid import UUID

import orjson
import structlog
from django.db import transaction
from django.utils import timezone
from pydantic import ValidationError as PydanticValidationError

from accounts.models import User
from common.exceptions import NotFoundError, ValidationError
from events.models import Event, EventPageVersion
from events.schema.page_config import EventPageConfigV1

logger = structlog.get_logger(__name__)

CURRENT_SCHEMA_VERSION = 1
MAX_VERSIONS_PER_EVENT = 10
DEFAULT_TEMPLATE_ID = "wedding_v1"

Document = dict[str, t.Any]


class PageConfigError(ValueError):
    """A stored or submitted page config cannot be migrated or validated."""

    def __init__(self, message: str, errors: list[t.Any] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def migrate_page_config(config: Document) -> Document:
    """Bring a config document to the current schema version.

    A missing ``schemaVersion`` means version 1.

    Raises:
        PageConfigError: the version is not known.
    """
    version = config.get("schemaVersion") or 1
    if version == 1:
        return {**config, "schemaVersion": 1}
    raise PageConfigError(f"Unsupported config version: {version}")


def validate_and_migrate(config: t.Any) -> EventPageConfigV1:
    """Migrate a config document and validate it against the current schema.

    Raises:
        PageConfigError: the config is not an object, has an unknown version or is invalid.
    """
    if not config or not isinstance(config, dict):
        raise PageConfigError("Invalid config: must be an object")
    migrated = migrate_page_config(config)
    try:
        return EventPageConfigV1.model_validate(migrated)
    except PydanticValidationError as e:
        raise PageConfigError(str(e), errors=e.errors(include_url=False, include_context=False)) from e


@dataclass(frozen=True)
class ValidationOutcome:
    success: bool
    data: EventPageConfigV1 | None = None
    error: str | None = None


def safe_validate_and_migrate(config: t.Any) -> ValidationOutcome:
    """Like :func:`validate_and_migrate`, but reports failures instead of raising."""
    try:
        return ValidationOutcome(success=True, data=validate_and_migrate(config))
    except PageConfigError as e:
        return ValidationOutcome(success=False, error=str(e))


def create_default_config(template_defaults: Document, overrides: Document | None = None) -> EventPageConfigV1:
    """Build a config from a template's defaults.

    ``theme`` and ``hero`` overrides are merged key by key; ``sections`` replace the defaults.
    """
    base = migrate_page_config(template_defaults)
    if not overrides:
        return EventPageConfigV1.model_validate(base)
    return EventPageConfigV1.model_validate(
        {
            "schemaVersion": CURRENT_SCHEMA_VERSION,
            "theme": {**base.get("theme", {}), **overrides.get("theme", {})},
            "hero": {**base.get("hero", {}), **overrides.get("hero", {})},
            "sections": overrides.get("sections", base.get("sections", [])),
        }
    )


def create_minimal_config(
    title: str,
    subtitle: str | None = None,
    preset: t.Literal["classic", "modern", "romantic"] = "modern",
    primary_color: str = "#2563EB",
) -> EventPageConfigV1:
    """The config a page starts from before anything was customized."""
    return EventPageConfigV1.model_validate(
        {
            "schemaVersion": CURRENT_SCHEMA_VERSION,
            "theme": {"preset": preset, "primaryColor": primary_color, "fontPair": "modern"},
            # Hero titles are capped at 80 characters, event titles at 200.
            "hero": {"title": title[:80], "subtitle": subtitle, "align": "center", "overlay": "soft"},
            "sections": [],
        }
    )


def _canonical(value: t.Any) -> bytes:
    if isinstance(value, EventPageConfigV1):
        value = value.to_document()
    return orjson.dumps(value, option=orjson.OPT_SORT_KEYS)


def configs_are_different(first: EventPageConfigV1 | Document, second: EventPageConfigV1 | Document) -> bool:
    return _canonical(first) != _canonical(second)


def get_config_change_summary(old: EventPageConfigV1, new: EventPageConfigV1) -> list[str]:
    """Human readable list of what changed between two configs."""
    changes: list[str] = []
    if old.theme.preset != new.theme.preset:
        changes.append(f"Theme preset changed to {new.theme.preset}")
    if old.theme.primary_color != new.theme.primary_color:
        changes.append(f"Primary color changed to {new.theme.primary_color}")
    if old.theme.font_pair != new.theme.font_pair:
        changes.append(f"Font pair changed to {new.theme.font_pair}")

    if old.hero.title != new.hero.title:
        changes.append("Hero title updated")
    if old.hero.subtitle != new.hero.subtitle:
        changes.append("Hero subtitle updated")
    if old.hero.hero_image_asset_id != new.hero.hero_image_asset_id:
        changes.append("Hero image changed")

    old_count, new_count = len(old.sections), len(new.sections)
    if new_count > old_count:
        changes.append(f"{new_count - old_count} section(s) added")
    elif old_count > new_count:
        changes.append(f"{old_count - new_count} section(s) removed")

    for old_section, new_section in zip(old.sections, new.sections):
        if _canonical(old_section.model_dump(mode="json")) != _canonical(new_section.model_dump(mode="json")):
            changes.append(f'Section "{new_section.type}" updated')

    return changes or ["No changes detected"]


def should_save_version(old: EventPageConfigV1 | None, new: EventPageConfigV1) -> bool:
    """The first config is always saved; later ones only when something changed."""
    if old is None:
        return True
    return configs_are_different(old, new)


def current_config(event: Event) -> EventPageConfigV1:
    """The event's validated config, or a minimal one when none is stored or it no longer validates."""
    outcome = safe_validate_and_migrate(event.page_config)
    if outcome.success:
        assert outcome.data is not None
        return outcome.data
    if event.page_config:
        logger.warning("page_config_invalid", event_id=str(event.id), error=outcome.error)
    return create_minimal_config(event.title)


def _record_version(event: Event, config: EventPageConfigV1, user: User) -> EventPageVersion:
    version = EventPageVersion.objects.create(
        event=event,
        page_config=config.to_document(),
        config_version=config.schema_version,
        created_by=user,
    )
    stale = EventPageVersion.objects.filter(event=event).order_by("-created_at").values_list("pk", flat=True)[
        MAX_VERSIONS_PER_EVENT:
    ]
    EventPageVersion.objects.filter(pk__in=list(stale)).delete()
    return version


@transaction.atomic
def save_page_config(event: Event, config: EventPageConfigV1, user: User, template_id: str | None = None) -> Event:
    """Store a new page config and record it in the version history."""
    previous = safe_validate_and_migrate(event.page_config).data
    if should_save_version(previous, config):
        _record_version(event, config, user)
    event.page_config = config.to_document()
    event.config_version = config.schema_version
    update_fields = ["page_config", "config_version", "updated_at"]
    if template_id:
        event.template_id = template_id
        update_fields.append("template_id")
    event.save(update_fields=update_fields)
    logger.info("page_config_saved", event_id=str(event.id))
    return event


def publish_page(event: Event) -> Event:
    """Make the event page public. An invalid stored config blocks publishing.

    Raises:
        ValidationError: the stored config does not validate.
    """
    if event.page_config:
        outcome = safe_validate_and_migrate(event.page_config)
        if not outcome.success:
            raise ValidationError("Cannot publish: page config is invalid")
        assert outcome.data is not None
        config = outcome.data
    else:
        config = create_minimal_config(event.title)
    event.page_config = config.to_document()
    event.published_at = timezone.now()
    event.save(update_fields=["page_config", "published_at", "updated_at"])
    return event


def unpublish_page(event: Event) -> Event:
    event.published_at = None
    event.save(update_fields=["published_at", "updated_at"])
    return event


def get_version(event: Event, version_id: UUID) -> EventPageVersion:
    version = EventPageVersion.objects.filter(pk=version_id, event=event).first()
    if version is None:
        raise NotFoundError("Version not found")
    return version


@transaction.atomic
def rollback_to_version(event: Event, version_id: UUID, user: User) -> EventPageConfigV1:
    """Make an older version current again. The rollback itself is recorded as a new version.

    Raises:
        NotFoundError: the version does not belong to the event.
        ValidationError: the version's config no longer validates.
    """
    version = get_version(event, version_id)
    outcome = safe_validate_and_migrate(version.page_config)
    if not outcome.success:
        raise ValidationError("Cannot rollback: version config is invalid")
    assert outcome.data is not None
    config = outcome.data
    _record_version(event, config, user)
    event.page_config = config.to_document()
    event.config_version = config.schema_version
    event.save(update_fields=["page_config", "config_version", "updated_at"])
    logger.info("page_config_rolled_back", event_id=str(event.id), version_id=str(version_id))
    return config
