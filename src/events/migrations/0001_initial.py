import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Organization",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", models.CharField(max_length=255)),
                ("slug", models.SlugField(max_length=255, unique=True)),
                ("logo_url", models.URLField(blank=True, max_length=2048, null=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="OrganizationMember",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "role",
                    models.CharField(
                        choices=[("OWNER", "Owner"), ("ADMIN", "Admin"), ("MEMBER", "Member")],
                        default="MEMBER",
                        max_length=10,
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="events.organization",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="organization_memberships",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("organization", "user"), name="unique_organization_member")
                ],
            },
        ),
        migrations.AddField(
            model_name="organization",
            name="members",
            field=models.ManyToManyField(
                related_name="organizations", through="events.OrganizationMember", to=settings.AUTH_USER_MODEL
            ),
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("title", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=255, unique=True)),
                ("description", models.TextField(blank=True, max_length=5000, null=True)),
                ("start_at", models.DateTimeField(db_index=True)),
                ("end_at", models.DateTimeField(blank=True, null=True)),
                ("timezone", models.CharField(default="UTC", max_length=64)),
                ("venue_name", models.CharField(blank=True, max_length=200, null=True)),
                ("address", models.CharField(blank=True, max_length=500, null=True)),
                ("city", models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ("country", models.CharField(blank=True, max_length=100, null=True)),
                (
                    "latitude",
                    models.FloatField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(-90),
                            django.core.validators.MaxValueValidator(90),
                        ],
                    ),
                ),
                (
                    "longitude",
                    models.FloatField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(-180),
                            django.core.validators.MaxValueValidator(180),
                        ],
                    ),
                ),
                (
                    "visibility",
                    models.CharField(
                        choices=[("PUBLIC", "Public"), ("UNLISTED", "Unlisted"), ("PRIVATE", "Private")],
                        default="PUBLIC",
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "Draft"),
                            ("PUBLISHED", "Published"),
                            ("CANCELLED", "Cancelled"),
                            ("COMPLETED", "Completed"),
                        ],
                        default="DRAFT",
                        max_length=10,
                    ),
                ),
                ("cover_image_url", models.URLField(blank=True, max_length=2048, null=True)),
                (
                    "max_attendees",
                    models.PositiveIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(10000),
                        ],
                    ),
                ),
                ("published_at", models.DateTimeField(blank=True, null=True)),
                ("config_version", models.PositiveIntegerField(default=1)),
                ("page_config", models.JSONField(blank=True, null=True)),
                ("template_id", models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ("theme_preset", models.CharField(blank=True, max_length=64, null=True)),
                ("preview_token_hash", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("preview_token_expires_at", models.DateTimeField(blank=True, null=True)),
                ("reminder_enabled", models.BooleanField(default=False)),
                (
                    "reminder_days",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(30),
                        ],
                    ),
                ),
                ("rsvp_deadline", models.DateTimeField(blank=True, null=True)),
                (
                    "creator",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="created_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="events",
                        to="events.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["start_at"],
                "indexes": [models.Index(fields=["status", "visibility"], name="event_status_visibility_idx")],
            },
        ),
        migrations.CreateModel(
            name="Invite",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("email", models.EmailField(db_index=True, max_length=254)),
                ("name", models.CharField(blank=True, max_length=200, null=True)),
                ("token_hash", models.CharField(max_length=64, unique=True)),
                (
                    "plus_ones_allowed",
                    models.PositiveSmallIntegerField(
                        default=0, validators=[django.core.validators.MaxValueValidator(10)]
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("SENT", "Sent"),
                            ("OPENED", "Opened"),
                            ("RESPONDED", "Responded"),
                            ("BOUNCED", "Bounced"),
                            ("EXPIRED", "Expired"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=10,
                    ),
                ),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("sent_at", models.DateTimeField(blank=True, null=True)),
                ("opened_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="invites", to="events.event"
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("event", "email"), name="unique_invite_email_per_event")
                ],
            },
        ),
        migrations.CreateModel(
            name="RSVP",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "response",
                    models.CharField(choices=[("YES", "Yes"), ("NO", "No"), ("MAYBE", "Maybe")], max_length=5),
                ),
                ("guest_name", models.CharField(max_length=200)),
                ("guest_email", models.EmailField(blank=True, max_length=254, null=True)),
                (
                    "guest_count",
                    models.PositiveSmallIntegerField(
                        default=1,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(11),
                        ],
                    ),
                ),
                ("notes", models.TextField(blank=True, max_length=1000, null=True)),
                ("responded_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="rsvps", to="events.event"
                    ),
                ),
                (
                    "invite",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="rsvp",
                        to="events.invite",
                    ),
                ),
            ],
            options={
                "verbose_name": "RSVP",
                "ordering": ["-responded_at"],
                "indexes": [models.Index(fields=["event", "response"], name="rsvp_event_response_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("guest_email__isnull", False), ("invite__isnull", True)),
                        fields=("event", "guest_email"),
                        name="unique_public_rsvp_email_per_event",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="PageTemplate",
            fields=[
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("category", models.CharField(db_index=True, max_length=64)),
                ("description", models.TextField(blank=True, null=True)),
                ("preview_url", models.URLField(blank=True, max_length=2048, null=True)),
                ("defaults", models.JSONField(blank=True, default=dict)),
                ("schema_version", models.PositiveIntegerField(default=1)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["category", "name"]},
        ),
        migrations.CreateModel(
            name="EventPageVersion",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("page_config", models.JSONField()),
                ("config_version", models.PositiveIntegerField()),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="page_versions", to="events.event"
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["event", "-created_at"], name="page_version_event_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="MediaAsset",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("kind", models.CharField(choices=[("HERO", "Hero"), ("GALLERY", "Gallery")], max_length=10)),
                ("bucket", models.CharField(max_length=64)),
                ("path", models.CharField(max_length=512)),
                ("public_url", models.URLField(blank=True, max_length=2048, null=True)),
                ("mime_type", models.CharField(max_length=64)),
                ("size_bytes", models.PositiveIntegerField()),
                ("width", models.PositiveIntegerField(blank=True, null=True)),
                ("height", models.PositiveIntegerField(blank=True, null=True)),
                ("alt", models.CharField(blank=True, default="", max_length=200)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="media_assets", to="events.event"
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="media_assets",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["event", "kind"], name="media_asset_event_kind_idx")],
            },
        ),
        migrations.CreateModel(
            name="InvitationConfig",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "template",
                    models.CharField(
                        choices=[
                            ("ENVELOPE_REVEAL", "Envelope Reveal"),
                            ("ENVELOPE_REVEAL_V2", "Envelope Reveal V2"),
                            ("SPLIT_REVEAL", "Split Reveal"),
                            ("LAYERED_UNFOLD", "Layered Unfold"),
                            ("CINEMATIC_SCROLL", "Cinematic Scroll"),
                            ("TIME_BASED_REVEAL", "Time Based Reveal"),
                        ],
                        default="ENVELOPE_REVEAL",
                        max_length=32,
                    ),
                ),
                (
                    "theme_id",
                    models.CharField(
                        choices=[
                            ("ivory", "Ivory"),
                            ("blush", "Blush"),
                            ("sage", "Sage"),
                            ("midnight", "Midnight"),
                            ("champagne", "Champagne"),
                        ],
                        default="ivory",
                        max_length=32,
                    ),
                ),
                (
                    "typography_pair",
                    models.CharField(
                        choices=[("classic", "Classic"), ("modern", "Modern"), ("traditional", "Traditional")],
                        default="classic",
                        max_length=32,
                    ),
                ),
                ("couple_display_name", models.CharField(blank=True, max_length=60, null=True)),
                ("person1_name", models.CharField(blank=True, max_length=50, null=True)),
                ("person2_name", models.CharField(blank=True, max_length=50, null=True)),
                ("header_text", models.CharField(blank=True, max_length=60, null=True)),
                ("event_type_text", models.CharField(blank=True, max_length=80, null=True)),
                ("monogram", models.CharField(blank=True, max_length=10, null=True)),
                ("custom_message", models.CharField(blank=True, max_length=200, null=True)),
                ("dress_code", models.CharField(blank=True, max_length=30, null=True)),
                ("hero_image_url", models.URLField(blank=True, max_length=2048, null=True)),
                ("locale", models.CharField(default="en-US", max_length=35)),
                (
                    "text_direction",
                    models.CharField(choices=[("LTR", "Ltr"), ("RTL", "Rtl")], default="LTR", max_length=3),
                ),
                (
                    "event",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invitation_config",
                        to="events.event",
                    ),
                ),
            ],
        ),
    ]
