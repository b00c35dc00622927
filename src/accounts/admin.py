"""Admin interface for accounts app."""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from unfold.admin import ModelAdmin

from accounts.models import User


@admin.register(User)
class EventsFixerUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[type-arg,misc]
    """Admin for users signing in through Firebase."""

    list_display = [
        "email",
        "name",
        "email_verified_display",
        "firebase_linked_display",
        "is_staff",
        "is_active",
        "date_joined",
        "event_count",
    ]
    list_filter = ["is_staff", "is_superuser", "is_active", "email_verified", "date_joined", "last_login"]
    search_fields = ["username", "email", "name", "firebase_uid"]
    ordering = ["-date_joined"]
    date_hierarchy = "date_joined"

    readonly_fields = [
        "id",
        "firebase_uid",
        "email_verified_at",
        "verification_expires_at",
        "date_joined",
        "last_login",
        "created_at",
        "updated_at",
    ]

    fieldsets = (
        (
            "Personal Information",
            {"fields": ("id", ("username", "email"), "name", "avatar_url")},
        ),
        (
            "Authentication",
            {
                "fields": (
                    "firebase_uid",
                    ("email_verified", "email_verified_at"),
                    "verification_expires_at",
                    ("date_joined", "last_login"),
                )
            },
        ),
        (
            "Permissions",
            {
                "fields": (("is_active", "is_staff", "is_superuser"), "groups", "user_permissions"),
                "classes": ["collapse"],
            },
        ),
    )
    autocomplete_fields = ["groups"]

    @admin.display(description="Email Verified", boolean=True)
    def email_verified_display(self, obj: User) -> bool:
        return obj.email_verified

    @admin.display(description="Firebase", boolean=True)
    def firebase_linked_display(self, obj: User) -> bool:
        return bool(obj.firebase_uid)

    @admin.display(description="Events")
    def event_count(self, obj: User) -> int:
        return obj.created_events.count()  # type: ignore[attr-defined]
