"""Admin registration for tools."""

from __future__ import annotations

from django.contrib import admin

from .models import Tool


@admin.register(Tool)
class ToolAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "price_per_day", "district", "active", "overall_rating", "num_ratings")
    list_filter = ("active", "district")
    search_fields = ("title", "owner__email")
    readonly_fields = ("overall_rating", "num_ratings", "created_at", "updated_at")
