from django.contrib import admin

from .models import ProgressRecord, WatchSummary


@admin.register(ProgressRecord)
class ProgressRecordAdmin(admin.ModelAdmin):
    list_display = (
        "profile_id",
        "media_type",
        "media_id",
        "season",
        "episode",
        "progress",
        "duration",
        "updated_at",
    )
    search_fields = ("media_id",)
    list_filter = ("media_type",)


@admin.register(WatchSummary)
class WatchSummaryAdmin(admin.ModelAdmin):
    list_display = ("profile_id", "media_type", "media_id", "title", "status", "updated_at")
    search_fields = ("media_id", "title")
    list_filter = ("status", "media_type")
