import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="EmailOutbox",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "template",
                    models.CharField(
                        choices=[
                            ("INVITE", "Invite"),
                            ("CONFIRMATION", "RSVP confirmation"),
                            ("REMINDER", "Event reminder"),
                            ("UPDATE", "Event update"),
                            ("CANCELLATION", "Event cancellation"),
                            ("VERIFICATION", "Email verification"),
                            ("NO_RESPONSE_REMINDER", "No-response reminder"),
                        ],
                        max_length=32,
                    ),
                ),
                ("to_email", models.EmailField(max_length=254)),
                ("subject", models.CharField(max_length=255)),
                ("payload", models.JSONField(blank=True, default=dict)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("QUEUED", "Queued"),
                            ("SENDING", "Sending"),
                            ("SENT", "Sent"),
                            ("DELIVERED", "Delivered"),
                            ("OPENED", "Opened"),
                            ("FAILED", "Failed"),
                            ("BOUNCED", "Bounced"),
                        ],
                        db_index=True,
                        default="QUEUED",
                        max_length=10,
                    ),
                ),
                ("provider_message_id", models.CharField(blank=True, db_index=True, max_length=255, null=True)),
                ("error", models.TextField(blank=True, null=True)),
                ("scheduled_for", models.DateTimeField(blank=True, null=True)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("opened_at", models.DateTimeField(blank=True, null=True)),
                (
                    "invite",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="emails",
                        to="events.invite",
                    ),
                ),
            ],
            options={
                "verbose_name": "Email",
                "verbose_name_plural": "Email Outbox",
                "ordering": ["-created_at"],
            },
        ),
    ]
