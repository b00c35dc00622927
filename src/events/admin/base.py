"""Base admin components: link mixins and inlines."""

import typing as t

from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import TabularInline

from events import models


# --- Helper Mixins for Reusable Link Fields ---
class UserLinkMixin:
    """Mixin to add a link to a user."""

    def user_link(self, obj: t.Any) -> str | None:
        user = getattr(obj, "user", None) or getattr(obj, "creator", None) or getattr(obj, "owner", None)
        if user is None:
            return None
        url = reverse("admin:accounts_user_change", args=[user.id])
        return format_html('<a href="{}">{}</a>', url, user.email)

    user_link.short_description = "User"  # type: ignore[attr-defined]


class OrganizationLinkMixin:
    """Mixin to add a link to an organization."""

    def organization_link(self, obj: t.Any) -> str | None:
        if not getattr(obj, "organization", None):
            return None
        url = reverse("admin:events_organization_change", args=[obj.organization.id])
        return format_html('<a href="{}">{}</a>', url, obj.organization.name)

    organization_link.short_description = "Organization"  # type: ignore[attr-defined]


class EventLinkMixin:
    """Mixin to add a link to an event."""

    def event_link(self, obj: t.Any) -> str | None:
        if not getattr(obj, "event", None):
            return None
        url = reverse("admin:events_event_change", args=[obj.event.id])
        return format_html('<a href="{}">{}</a>', url, obj.event.title)

    event_link.short_description = "Event"  # type: ignore[attr-defined]


# --- Inlines ---
class OrganizationMemberInline(TabularInline):  # type: ignore[misc]
    model = models.OrganizationMember
    extra = 1
    autocomplete_fields = ["user"]
    fields = ["user", "role"]


class InviteInline(TabularInline):  # type: ignore[misc]
    model = models.Invite
    extra = 0
    show_change_link = True
    fields = ["email", "name", "status", "plus_ones_allowed", "sent_at"]
    readonly_fields = ["status", "sent_at"]


class RSVPInline(TabularInline):  # type: ignore[misc]
    model = models.RSVP
    extra = 0
    show_change_link = True
    fields = ["guest_name", "guest_email", "response", "guest_count", "responded_at"]
    readonly_fields = ["responded_at"]
