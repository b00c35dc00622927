from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field, field_validator

from common.schema import StrippedString
from events.models import InvitationConfig


class InvitationConfigInputSchema(Schema):
    template: InvitationConfig.Template = InvitationConfig.Template.ENVELOPE_REVEAL
    theme_id: InvitationConfig.Theme = InvitationConfig.Theme.IVORY
    typography_pair: InvitationConfig.TypographyPair = InvitationConfig.TypographyPair.CLASSIC
    couple_display_name: StrippedString | None = Field(None, max_length=60)
    person1_name: StrippedString | None = Field(None, max_length=50)
    person2_name: StrippedString | None = Field(None, max_length=50)
    header_text: StrippedString | None = Field(None, max_length=60)
    event_type_text: StrippedString | None = Field(None, max_length=80)
    monogram: StrippedString | None = Field(None, max_length=10)
    custom_message: StrippedString | None = Field(None, max_length=200)
    dress_code: StrippedString | None = Field(None, max_length=30)
    hero_image_url: str | None = Field(None, max_length=2048, description="An http(s) URL, or empty to clear it.")
    locale: str = Field("en-US", max_length=35)
    text_direction: InvitationConfig.TextDirection = InvitationConfig.TextDirection.LTR

    @field_validator("hero_image_url")
    @classmethod
    def http_url_or_empty(cls, value: str | None) -> str | None:
        if value and not value.startswith(("http://", "https://")):
            raise ValueError("Must be a valid URL")
        return value


class InvitationConfigSchema(ModelSchema):
    id: UUID
    event_id: UUID

    class Meta:
        model = InvitationConfig
        exclude = ["id", "event"]
