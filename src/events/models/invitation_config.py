from django.db import models

from common.models import TimeStampedModel

from .event import Event


class InvitationConfig(TimeStampedModel):
    """How the animated invitation for an event looks and what it says."""

    class Template(models.TextChoices):
        ENVELOPE_REVEAL = "ENVELOPE_REVEAL"
        ENVELOPE_REVEAL_V2 = "ENVELOPE_REVEAL_V2"
        SPLIT_REVEAL = "SPLIT_REVEAL"
        LAYERED_UNFOLD = "LAYERED_UNFOLD"
        CINEMATIC_SCROLL = "CINEMATIC_SCROLL"
        TIME_BASED_REVEAL = "TIME_BASED_REVEAL"

    class Theme(models.TextChoices):
        IVORY = "ivory"
        BLUSH = "blush"
        SAGE = "sage"
        MIDNIGHT = "midnight"
        CHAMPAGNE = "champagne"

    class TypographyPair(models.TextChoices):
        CLASSIC = "classic"
        MODERN = "modern"
        TRADITIONAL = "traditional"

    class TextDirection(models.TextChoices):
        LTR = "LTR"
        RTL = "RTL"

    event = models.OneToOneField(Event, on_delete=models.CASCADE, related_name="invitation_config")
    template = models.CharField(max_length=32, choices=Template.choices, default=Template.ENVELOPE_REVEAL)
    theme_id = models.CharField(max_length=32, choices=Theme.choices, default=Theme.IVORY)
    typography_pair = models.CharField(max_length=32, choices=TypographyPair.choices, default=TypographyPair.CLASSIC)
    couple_display_name = models.CharField(max_length=60, null=True, blank=True)
    person1_name = models.CharField(max_length=50, null=True, blank=True)
    person2_name = models.CharField(max_length=50, null=True, blank=True)
    header_text = models.CharField(max_length=60, null=True, blank=True)
    event_type_text = models.CharField(max_length=80, null=True, blank=True)
    monogram = models.CharField(max_length=10, null=True, blank=True)
    custom_message = models.CharField(max_length=200, null=True, blank=True)
    dress_code = models.CharField(max_length=30, null=True, blank=True)
    hero_image_url = models.URLField(max_length=2048, null=True, blank=True)
    locale = models.CharField(max_length=35, default="en-US")
    text_direction = models.CharField(max_length=3, choices=TextDirection.choices, default=TextDirection.LTR)

    def __str__(self) -> str:
        return f"{self.template} for {self.event_id}"
