"""Admin classes for Organization and OrganizationMember."""

from django.contrib import admin
from django.db.models import Count, QuerySet
from django.http import HttpRequest
from unfold.admin import ModelAdmin

from events import models
from events.admin.base import OrganizationLinkMixin, OrganizationMemberInline, UserLinkMixin


@admin.register(models.Organization)
class OrganizationAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["name", "slug", "members_count", "events_count", "created_at"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ("name",)}
    inlines = [OrganizationMemberInline]

    def get_queryset(self, request: HttpRequest) -> QuerySet[models.Organization]:
        return (
            super()
            .get_queryset(request)
            .annotate(
                members_total=Count("memberships", distinct=True),
                events_total=Count("events", distinct=True),
            )
        )

    @admin.display(description="Members", ordering="members_total")
    def members_count(self, obj: models.Organization) -> int:
        return obj.members_total  # type: ignore[attr-defined,no-any-return]

    @admin.display(description="Events", ordering="events_total")
    def events_count(self, obj: models.Organization) -> int:
        return obj.events_total  # type: ignore[attr-defined,no-any-return]


@admin.register(models.OrganizationMember)
class OrganizationMemberAdmin(ModelAdmin, UserLinkMixin, OrganizationLinkMixin):  # type: ignore[misc]
    list_display = ["user_link", "organization_link", "role", "created_at"]
    list_filter = ["role"]
    search_fields = ["user__email", "organization__name"]
    autocomplete_fields = ["user", "organization"]
