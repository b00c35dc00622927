import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AnalyticsEvent",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("page_view", "Page view"),
                            ("rsvp_form_started", "RSVP form started"),
                            ("rsvp_form_abandoned", "RSVP form abandoned"),
                            ("rsvp_form_submitted", "RSVP form submitted"),
                            ("section_viewed", "Section viewed"),
                        ],
                        max_length=32,
                    ),
                ),
                ("session_id", models.CharField(db_index=True, max_length=128)),
                ("data", models.JSONField(blank=True, null=True)),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="analytics_events",
                        to="events.event",
                    ),
                ),
            ],
            options={
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(fields=["event", "type"], name="analytics_event_type_idx"),
                    models.Index(fields=["event", "timestamp"], name="analytics_event_time_idx"),
                ],
            },
        ),
    ]
