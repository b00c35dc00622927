from django.contrib import admin
from unfold.admin import ModelAdmin

from analytics.models import AnalyticsEvent


@admin.register(AnalyticsEvent)
class AnalyticsEventAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["type", "event", "session_id", "timestamp"]
    list_filter = ["type", "timestamp"]
    search_fields = ["session_id", "event__title"]
    readonly_fields = ["event", "type", "session_id", "data", "timestamp"]
    date_hierarchy = "timestamp"
