"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "host",
        "customer_name",
        "customer_email",
        "start_time",
        "end_time",
        "status",
        "amount",
        "currency",
        "payment_gateway",
        "created_at",
    )
    list_filter = ("status", "payment_gateway", "currency")
    search_fields = ("customer_email", "customer_name", "host__email", "razorpay_order_id", "payu_txn_id")
    readonly_fields = (
        "razorpay_order_id",
        "razorpay_payment_id",
        "payu_txn_id",
        "created_at",
        "updated_at",
    )
