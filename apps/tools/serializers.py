"""Serializers for tool listings."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .models import Tool


class ToolSerializer(serializers.ModelSerializer):
    owner_id = serializers.UUIDField()
    owner_name = serializers.ReadOnlyField(source="owner.name")
    price_per_day = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.01")
    )

    class Meta:
        model = Tool
        fields = [
            "id",
            "owner_id",
            "owner_name",
            "title",
            "description",
            "price_per_day",
            "district",
            "location",
            "active",
            "overall_rating",
            "num_ratings",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "owner_name",
            "active",
            "overall_rating",
            "num_ratings",
            "created_at",
            "updated_at",
        ]

    def update(self, instance, validated_data):  # type: ignore
        # The owner of a listing never changes
        validated_data.pop("owner_id", None)
        return super().update(instance, validated_data)
