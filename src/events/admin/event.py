"""Admin classes for Event and related models."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from unfold.admin import ModelAdmin

from events import models
from events.admin.base import (
    EventLinkMixin,
    InviteInline,
    OrganizationLinkMixin,
    RSVPInline,
    UserLinkMixin,
)


@admin.register(models.Event)
class EventAdmin(ModelAdmin, OrganizationLinkMixin, UserLinkMixin):  # type: ignore[misc]
    list_display = [
        "title",
        "organization_link",
        "user_link",
        "status",
        "visibility",
        "start_at",
        "city",
    ]
    list_filter = ["status", "visibility", "start_at", "reminder_enabled"]
    search_fields = ["title", "slug", "city", "creator__email", "organization__name"]
    autocomplete_fields = ["creator", "organization"]
    prepopulated_fields = {"slug": ("title",)}
    date_hierarchy = "start_at"
    readonly_fields = ["preview_token_hash", "preview_token_expires_at", "published_at", "created_at", "updated_at"]
    inlines = [InviteInline, RSVPInline]

    fieldsets = [
        (
            "Details",
            {
                "fields": (
                    ("creator", "organization"),
                    ("title", "slug"),
                    "description",
                    ("start_at", "end_at", "timezone"),
                    ("status", "visibility", "published_at"),
                    "max_attendees",
                    "cover_image_url",
                )
            },
        ),
        (
            "Location",
            {"fields": ("venue_name", "address", ("city", "country"), ("latitude", "longitude"))},
        ),
        (
            "Page",
            {
                "fields": (
                    ("template_id", "theme_preset", "config_version"),
                    "page_config",
                    ("preview_token_hash", "preview_token_expires_at"),
                ),
                "classes": ("collapse",),
            },
        ),
        (
            "Reminders",
            {"fields": (("reminder_enabled", "reminder_days"), "rsvp_deadline")},
        ),
        (
            "Timestamps",
            {"fields": ("created_at", "updated_at"), "classes": ("collapse",)},
        ),
    ]

    def get_queryset(self, request: HttpRequest) -> QuerySet[models.Event]:
        return super().get_queryset(request).select_related("creator", "organization")


@admin.register(models.Invite)
class InviteAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["email", "name", "event_link", "status", "plus_ones_allowed", "sent_at", "opened_at"]
    list_filter = ["status"]
    search_fields = ["email", "name", "event__title"]
    autocomplete_fields = ["event"]
    readonly_fields = ["token_hash", "sent_at", "opened_at", "created_at"]


@admin.register(models.RSVP)
class RSVPAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["guest_name", "guest_email", "event_link", "response", "guest_count", "responded_at"]
    list_filter = ["response"]
    search_fields = ["guest_name", "guest_email", "event__title"]
    autocomplete_fields = ["event", "invite"]


@admin.register(models.InvitationConfig)
class InvitationConfigAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["event_link", "template", "theme_id", "typography_pair", "locale"]
    list_filter = ["template", "theme_id"]
    search_fields = ["event__title", "couple_display_name"]
    autocomplete_fields = ["event"]


@admin.register(models.PageTemplate)
class PageTemplateAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["id", "name", "category", "schema_version", "is_active"]
    list_filter = ["category", "is_active"]
    search_fields = ["id", "name"]


@admin.register(models.EventPageVersion)
class EventPageVersionAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["event_link", "config_version", "created_by", "created_at"]
    search_fields = ["event__title"]
    readonly_fields = ["event", "page_config", "config_version", "created_by", "created_at"]


@admin.register(models.MediaAsset)
class MediaAssetAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["path", "event_link", "kind", "width", "height", "size_bytes", "created_at"]
    list_filter = ["kind"]
    search_fields = ["path", "event__title", "alt"]
    readonly_fields = ["bucket", "path", "public_url", "mime_type", "size_bytes", "width", "height"]
