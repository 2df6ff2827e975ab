"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "tool",
        "renter",
        "status",
        "payment_status",
        "deposit_status",
        "start_date",
        "end_date",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "deposit_status", "start_date")
    search_fields = ("tool__title", "renter__email", "owner__email")
    readonly_fields = (
        "owner",
        "total_price",
        "paid_at",
        "refund_amount",
        "refund_percentage",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
