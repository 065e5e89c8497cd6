"""Admin registration for availability rules."""

from __future__ import annotations

from django.contrib import admin

from .models import AvailabilityRule


@admin.register(AvailabilityRule)
class AvailabilityRuleAdmin(admin.ModelAdmin):
    list_display = (
        "host",
        "day_of_week",
        "specific_date",
        "start_time",
        "end_time",
        "slot_duration",
        "buffer_minutes",
        "is_free",
        "price",
        "price_usd",
    )
    list_filter = ("day_of_week", "is_free")
    search_fields = ("host__email", "host__username")
    readonly_fields = ("created_at",)
