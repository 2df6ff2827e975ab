"""Serializers for reports."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Report


class ReportSerializer(serializers.ModelSerializer):
    reporter_id = serializers.UUIDField()
    tool_id = serializers.UUIDField(required=False, allow_null=True)
    booking_id = serializers.UUIDField(required=False, allow_null=True)

    class Meta:
        model = Report
        fields = [
            "id",
            "reporter_id",
            "tool_id",
            "booking_id",
            "title",
            "description",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "status", "created_at", "updated_at"]


class ReportStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Report.Status.choices)
