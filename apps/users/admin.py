"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("email", "name", "role", "status", "subscription_tier", "reputation_score", "wallet_balance")
    list_filter = ("role", "status", "subscription_tier")
    search_fields = ("email", "name")
    readonly_fields = ("reputation_score", "wallet_balance", "created_at", "updated_at")
