"""Schemas for event pages: config, versions, templates, media and preview links."""

import typing as t
from datetime import datetime
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from events.models import MediaAsset, PageTemplate

from .event import EventSchema


class MediaAssetSchema(ModelSchema):
    id: UUID

    class Meta:
        model = MediaAsset
        fields = ["kind", "public_url", "width", "height", "alt", "created_at"]


class MediaUploadResultSchema(Schema):
    id: UUID
    public_url: str | None = None
    width: int | None = None
    height: int | None = None
    kind: MediaAsset.Kind


class MediaListSchema(Schema):
    assets: list[MediaAssetSchema]


class PageConfigSchema(Schema):
    config: dict[str, t.Any]
    template_id: str
    is_published: bool
    published_at: datetime | None = None
    assets: list[MediaAssetSchema]


class PageConfigUpdateSchema(Schema):
    config: dict[str, t.Any] = Field(..., description="The page config document (camelCase keys).")
    template_id: str | None = Field(None, max_length=64)


class PageConfigUpdatedSchema(Schema):
    updated: bool = True


class PageActionSchema(Schema):
    action: str = Field(..., description="`publish` or `unpublish`")


class PagePublishStateSchema(Schema):
    published: bool
    published_at: datetime | None = None


class VersionAuthorSchema(Schema):
    id: UUID | None = None
    name: str | None = None
    email: str | None = None


class PageVersionSchema(Schema):
    id: UUID
    config_version: int
    created_at: datetime
    created_by: VersionAuthorSchema


class PageVersionListSchema(Schema):
    versions: list[PageVersionSchema]


class PageVersionDetailSchema(Schema):
    id: UUID
    config: dict[str, t.Any] = Field(..., alias="page_config")
    config_version: int
    created_at: datetime


class RollbackResultSchema(Schema):
    rolled_back: bool = True
    config: dict[str, t.Any]


class PageTemplateSchema(ModelSchema):
    class Meta:
        model = PageTemplate
        fields = ["id", "name", "category", "description", "preview_url", "defaults", "schema_version"]


class PreviewTokenStatusSchema(Schema):
    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None


class PreviewTokenSchema(Schema):
    token: str
    expires_at: datetime


class PreviewTokenRevokedSchema(Schema):
    revoked: bool = True


class PreviewPageSchema(Schema):
    event: EventSchema
    config: dict[str, t.Any]
    template_id: str
    assets: list[MediaAssetSchema]
