"""Admin registration for finances."""

from __future__ import annotations

from django.contrib import admin

from .models import PaymentTransaction, Payout


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "kind", "event", "status", "amount", "booking", "user", "created_at")
    list_filter = ("kind", "status", "event")
    search_fields = ("session_id", "event_id")
    readonly_fields = ("payload", "created_at")


@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    list_display = ("id", "owner", "amount", "status", "requested_at", "completed_at")
    list_filter = ("status",)
    search_fields = ("owner__email", "external_transfer_id")
    readonly_fields = ("requested_at", "completed_at", "external_transfer_id")
