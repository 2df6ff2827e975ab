"""Admin registration for reports."""

from __future__ import annotations

from django.contrib import admin

from .models import Report


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ("title", "reporter", "tool", "booking", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("title", "description", "reporter__email")
