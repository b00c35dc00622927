"""Django admin for the email outbox."""

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.html import format_html
from unfold.admin import ModelAdmin

from notifications.enums import EmailStatus
from notifications.models import EmailOutbox
from notifications.service import outbox
from notifications.tasks import deliver_email


@admin.register(EmailOutbox)
class EmailOutboxAdmin(ModelAdmin):  # type: ignore[misc]
    """Admin for queued and sent emails."""

    list_display = [
        "to_email",
        "template",
        "subject_short",
        "status_colored",
        "sent_at",
        "created_at",
    ]
    list_filter = [
        "template",
        "status",
        "created_at",
    ]
    search_fields = [
        "to_email",
        "subject",
        "provider_message_id",
    ]
    readonly_fields = [
        "id",
        "invite",
        "provider_message_id",
        "sent_at",
        "delivered_at",
        "opened_at",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    actions = ["resend_selected"]

    fieldsets = (
        (
            "Message",
            {
                "fields": (
                    "id",
                    "invite",
                    "template",
                    "to_email",
                    "subject",
                    "payload",
                )
            },
        ),
        (
            "Delivery",
            {
                "fields": (
                    "status",
                    "error",
                    "provider_message_id",
                    "scheduled_for",
                    ("sent_at", "delivered_at", "opened_at"),
                )
            },
        ),
        (
            "Timestamps",
            {
                "fields": (
                    "created_at",
                    "updated_at",
                ),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.display(description="Subject")
    def subject_short(self, obj: EmailOutbox) -> str:
        if len(obj.subject) > 60:
            return obj.subject[:57] + "..."
        return obj.subject

    @admin.display(description="Status", ordering="status")
    def status_colored(self, obj: EmailOutbox) -> str:
        color_map = {
            EmailStatus.QUEUED: "orange",
            EmailStatus.SENDING: "orange",
            EmailStatus.SENT: "green",
            EmailStatus.DELIVERED: "green",
            EmailStatus.OPENED: "green",
            EmailStatus.FAILED: "red",
            EmailStatus.BOUNCED: "red",
        }
        color = color_map.get(obj.status, "black")  # type: ignore[call-overload]
        return format_html('<span style="color: {};">{}</span>', color, obj.status)

    @admin.action(description="Resend failed or bounced emails")
    def resend_selected(self, request: HttpRequest, queryset: QuerySet[EmailOutbox]) -> None:
        resent = 0
        for email in queryset.filter(status__in=outbox.RESENDABLE_STATUSES):
            new_email = outbox.resend_email(email.id)
            deliver_email.delay(str(new_email.id))
            resent += 1
        self.message_user(request, f"Resent {resent} email(s).")
