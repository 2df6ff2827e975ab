"""Admin registration for reviews."""

from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'review_type', 'rating', 'reviewer', 'target_tool', 'target_user', 'created_at')
    list_filter = ('review_type', 'rating')
    search_fields = ('comment', 'reviewer__email')
