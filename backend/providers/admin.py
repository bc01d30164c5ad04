from django.contrib import admin

from .models import StreamProvider


@admin.register(StreamProvider)
class StreamProviderAdmin(admin.ModelAdmin):
    list_display = (
        "key",
        "name",
        "family",
        "priority",
        "supports_resume",
        "is_active",
        "is_healthy",
        "last_check_at",
    )
    search_fields = ("key", "name", "host")
    list_filter = ("family", "is_active", "is_healthy", "supports_resume")
    ordering = ("priority",)

    # Health state belongs to the monitor service.
    readonly_fields = StreamProvider.HEALTH_FIELDS
