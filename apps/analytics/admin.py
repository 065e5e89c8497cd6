"""Admin registration for analytics events."""

from __future__ import annotations

from django.contrib import admin

from .models import AnalyticsEvent


@admin.register(AnalyticsEvent)
class AnalyticsEventAdmin(admin.ModelAdmin):
    list_display = ("event", "host", "session_id", "created_at")
    list_filter = ("event",)
    search_fields = ("host__email", "host__username", "session_id")
    date_hierarchy = "created_at"
