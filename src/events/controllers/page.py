from uuid import UUID

from ninja import File, Form
from ninja.files import UploadedFile
from ninja_extra import api_controller, route

from common.authentication import FirebaseAuth
from common.exceptions import ValidationError
from common.schema import DataResponse
from common.throttling import ApiThrottle
from events import schema
from events.models import Event, EventPageVersion, MediaAsset
from events.service import media, page_config, preview

from .base import EventOwnerController


def _page_state(event: Event) -> dict[str, object]:
    return {
        "config": page_config.current_config(event).to_document(),
        "template_id": event.template_id or page_config.DEFAULT_TEMPLATE_ID,
        "is_published": event.published_at is not None,
        "published_at": event.published_at,
        "assets": list(MediaAsset.objects.filter(event=event)),
    }


def _version_summary(version: EventPageVersion) -> dict[str, object]:
    author = version.created_by
    return {
        "id": version.id,
        "config_version": version.config_version,
        "created_at": version.created_at,
        "created_by": {
            "id": author.id if author else None,
            "name": author.name if author else None,
            "email": author.email if author else None,
        },
    }


@api_controller("/events/{event_id}/page-config", auth=FirebaseAuth(), tags=["Event page"], throttle=ApiThrottle())
class PageConfigController(EventOwnerController):
    """The customizable public page of an event and its version history."""

    @route.get("", url_name="get_page_config", response=DataResponse[schema.PageConfigSchema])
    def get_page_config(self, event_id: UUID) -> dict[str, object]:
        """The current page config with its publish state and the event's media.

        Events without a valid stored config get a minimal one built from the title.
        """
        event = self.get_event(event_id)
        return {"data": _page_state(event)}

    @route.put("", url_name="update_page_config", response=DataResponse[schema.PageConfigUpdatedSchema])
    def update_page_config(self, event_id: UUID, payload: schema.PageConfigUpdateSchema) -> dict[str, object]:
        """Replace the page config. A changed config is recorded in the version history."""
        event = self.get_event(event_id)
        try:
            config = page_config.validate_and_migrate(payload.config)
        except page_config.PageConfigError as e:
            raise ValidationError("Invalid page config", details=e.errors or str(e)) from e
        page_config.save_page_config(event, config, self.user(), payload.template_id)
        return {"data": {"updated": True}}

    @route.post("", url_name="page_config_action", response=DataResponse[schema.PagePublishStateSchema])
    def page_action(self, event_id: UUID, payload: schema.PageActionSchema) -> dict[str, object]:
        """`publish` makes the page public, `unpublish` hides it again."""
        event = self.get_event(event_id)
        if payload.action == "publish":
            event = page_config.publish_page(event)
        elif payload.action == "unpublish":
            event = page_config.unpublish_page(event)
        else:
            raise ValidationError("Invalid action. Must be 'publish' or 'unpublish'")
        return {"data": {"published": event.published_at is not None, "published_at": event.published_at}}

    @route.get("/versions", url_name="list_page_versions", response=DataResponse[schema.PageVersionListSchema])
    def list_versions(self, event_id: UUID) -> dict[str, object]:
        """Earlier configs, newest first, with who saved them."""
        event = self.get_event(event_id)
        versions = EventPageVersion.objects.filter(event=event).select_related("created_by")[:50]
        return {"data": {"versions": [_version_summary(version) for version in versions]}}

    @route.get(
        "/versions/{version_id}",
        url_name="get_page_version",
        response=DataResponse[schema.PageVersionDetailSchema],
    )
    def get_version(self, event_id: UUID, version_id: UUID) -> dict[str, EventPageVersion]:
        event = self.get_event(event_id)
        return {"data": page_config.get_version(event, version_id)}

    @route.post(
        "/versions/{version_id}",
        url_name="rollback_page_version",
        response=DataResponse[schema.RollbackResultSchema],
    )
    def rollback(self, event_id: UUID, version_id: UUID) -> dict[str, object]:
        """Make an earlier version the current config again."""
        event = self.get_event(event_id)
        config = page_config.rollback_to_version(event, version_id, self.user())
        return {"data": {"rolled_back": True, "config": config.to_document()}}


@api_controller("/events/{event_id}/preview-token", auth=FirebaseAuth(), tags=["Event page"], throttle=ApiThrottle())
class PreviewTokenController(EventOwnerController):
    """Share links that show an unpublished page."""

    @route.get("", url_name="get_preview_token", response=DataResponse[schema.PreviewTokenStatusSchema])
    def get_status(self, event_id: UUID) -> dict[str, preview.PreviewTokenStatus]:
        event = self.get_event(event_id)
        return {"data": preview.get_preview_token_status(event)}

    @route.post("", url_name="create_preview_token", response=DataResponse[schema.PreviewTokenSchema])
    def create_token(self, event_id: UUID) -> dict[str, object]:
        """Issue a link valid for 7 days. Earlier links stop working."""
        event = self.get_event(event_id)
        token, expires_at = preview.create_preview_token(event)
        return {"data": {"token": token, "expires_at": expires_at}}

    @route.delete("", url_name="revoke_preview_token", response=DataResponse[schema.PreviewTokenRevokedSchema])
    def revoke_token(self, event_id: UUID) -> dict[str, object]:
        event = self.get_event(event_id)
        preview.revoke_preview_token(event)
        return {"data": {"revoked": True}}


@api_controller("/events/{event_id}/media", auth=FirebaseAuth(), tags=["Event page"], throttle=ApiThrottle())
class MediaController(EventOwnerController):
    """Images shown on the event page."""

    @route.get("", url_name="list_media", response=DataResponse[schema.MediaListSchema])
    def list_media(self, event_id: UUID) -> dict[str, object]:
        event = self.get_event(event_id)
        return {"data": {"assets": list(MediaAsset.objects.filter(event=event))}}

    @route.post("", url_name="upload_media", response={201: DataResponse[schema.MediaUploadResultSchema]})
    def upload_media(
        self,
        event_id: UUID,
        file: File[UploadedFile],
        kind: Form[str],
        alt: Form[str] = "",
    ) -> tuple[int, dict[str, MediaAsset]]:
        """Upload a JPEG, PNG or WebP image of at most 5MB.

        `kind` is `HERO` or `GALLERY`. Images are converted to WebP and scaled down to at
        most 4000x4000 pixels. An event holds at most 20 images.
        """
        event = self.get_event(event_id)
        asset = media.upload_media(event, self.user(), file.read(), kind, alt)
        return 201, {"data": asset}

    @route.delete("/{asset_id}", url_name="delete_media", response={204: None})
    def delete_media(self, event_id: UUID, asset_id: UUID) -> tuple[int, None]:
        event = self.get_event(event_id)
        media.delete_media(event, asset_id)
        return 204, None
