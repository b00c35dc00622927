"""The event page config document.

Stored as JSON on ``Event.page_config`` and in ``EventPageVersion`` rows, with camelCase keys.
"""

import re
import typing as t
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
MIN_CONTRAST_RATIO = 4.5

PAGE_CONFIG_LIMITS = {
    "max_sections": 12,
    "max_gallery_images": 20,
    "max_faq_items": 10,
    "max_schedule_items": 20,
    "hero_title_length": 80,
    "hero_subtitle_length": 120,
    "max_file_size_bytes": 5 * 1024 * 1024,
    "max_assets_per_event": 50,
}


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance of a ``#RRGGBB`` color."""
    channels = []
    for i in (1, 3, 5):
        value = int(hex_color[i : i + 2], 16) / 255
        channels.append(value / 12.92 if value <= 0.03928 else ((value + 0.055) / 1.055) ** 2.4)
    red, green, blue = channels
    return 0.2126 * red + 0.7152 * green + 0.0722 * blue


def contrast_ratio(first: str, second: str) -> float:
    lighter, darker = sorted((relative_luminance(first), relative_luminance(second)), reverse=True)
    return (lighter + 0.05) / (darker + 0.05)


def is_accessible_color(color: str) -> bool:
    """Whether text in this color is readable on white (WCAG AA, 4.5:1)."""
    if not HEX_COLOR_RE.match(color):
        return False
    return contrast_ratio(color, "#FFFFFF") >= MIN_CONTRAST_RATIO


class PageConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ThemeConfig(PageConfigModel):
    preset: t.Literal["classic", "modern", "romantic"]
    primary_color: str
    font_pair: t.Literal["serif_sans", "modern", "classic"]

    @field_validator("primary_color")
    @classmethod
    def validate_primary_color(cls, value: str) -> str:
        if not HEX_COLOR_RE.match(value):
            raise ValueError("Must be a valid hex color (e.g., #FF5733)")
        if not is_accessible_color(value):
            raise ValueError("Color must meet WCAG AA contrast requirements (4.5:1 ratio)")
        return value


class HeroConfig(PageConfigModel):
    title: str = Field(..., min_length=1, max_length=80)
    subtitle: str | None = Field(None, max_length=120)
    hero_image_asset_id: UUID | None = None
    align: t.Literal["left", "center"]
    overlay: t.Literal["none", "soft", "strong"]


class DetailsData(PageConfigModel):
    date_text: str = Field(..., max_length=100)
    location_text: str = Field(..., max_length=200)


class ScheduleItem(PageConfigModel):
    time: str = Field(..., max_length=20)
    title: str = Field(..., max_length=100)
    description: str | None = Field(None, max_length=500)


class ScheduleData(PageConfigModel):
    items: list[ScheduleItem] = Field(..., max_length=20)


class FaqItem(PageConfigModel):
    q: str = Field(..., max_length=200)
    a: str = Field(..., max_length=1000)


class FaqData(PageConfigModel):
    items: list[FaqItem] = Field(..., max_length=10)


class GalleryData(PageConfigModel):
    asset_ids: list[UUID] = Field(..., max_length=20)


class DetailsSection(PageConfigModel):
    type: t.Literal["details"]
    enabled: bool
    data: DetailsData


class ScheduleSection(PageConfigModel):
    type: t.Literal["schedule"]
    enabled: bool
    data: ScheduleData


class FaqSection(PageConfigModel):
    type: t.Literal["faq"]
    enabled: bool
    data: FaqData


class GallerySection(PageConfigModel):
    type: t.Literal["gallery"]
    enabled: bool
    data: GalleryData


Section = t.Annotated[
    DetailsSection | ScheduleSection | FaqSection | GallerySection,
    Field(discriminator="type"),
]


class EventPageConfigV1(PageConfigModel):
    schema_version: t.Literal[1]
    theme: ThemeConfig
    hero: HeroConfig
    sections: list[Section] = Field(..., max_length=12)

    def to_document(self) -> dict[str, t.Any]:
        """The JSON document as stored, with camelCase keys and unset optionals left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
