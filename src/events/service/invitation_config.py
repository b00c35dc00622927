from common.exceptions import NotFoundError
from events.models import Event, InvitationConfig
from events.schema import InvitationConfigInputSchema

OPTIONAL_TEXT_FIELDS = (
    "couple_display_name",
    "person1_name",
    "person2_name",
    "header_text",
    "event_type_text",
    "monogram",
    "custom_message",
    "dress_code",
    "hero_image_url",
)


def get_invitation_config(event: Event) -> InvitationConfig | None:
    return InvitationConfig.objects.filter(event=event).first()


def upsert_invitation_config(event: Event, payload: InvitationConfigInputSchema) -> InvitationConfig:
    """Create or replace the event's invitation config. Empty strings are stored as NULL."""
    data = payload.model_dump()
    for field in OPTIONAL_TEXT_FIELDS:
        data[field] = data.get(field) or None
    config, _ = InvitationConfig.objects.update_or_create(event=event, defaults=data)
    return config


def delete_invitation_config(event: Event) -> None:
    deleted, _ = InvitationConfig.objects.filter(event=event).delete()
    if not deleted:
        raise NotFoundError("Invitation config not found")
