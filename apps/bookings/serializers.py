"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    tool_id = serializers.UUIDField(read_only=True)
    tool_title = serializers.ReadOnlyField(source="tool.title")
    renter_id = serializers.UUIDField(read_only=True)
    owner_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "tool_id",
            "tool_title",
            "renter_id",
            "owner_id",
            "start_date",
            "end_date",
            "status",
            "payment_status",
            "total_price",
            "paid_at",
            "condition_status",
            "condition_description",
            "condition_reported_by",
            "condition_reported_at",
            "deposit_status",
            "deposit_amount",
            "deposit_paid_at",
            "cancelled_at",
            "refund_amount",
            "refund_percentage",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCreateSerializer(serializers.Serializer):
    """Rental request from a renter."""

    tool_id = serializers.UUIDField()
    renter_id = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()


class BookingActorSerializer(serializers.Serializer):
    actor_id = serializers.UUIDField()


class OwnerDecisionSerializer(serializers.Serializer):
    actor_id = serializers.UUIDField(required=False)


class ConditionReportSerializer(serializers.Serializer):
    actor_id = serializers.UUIDField()
    condition = serializers.ChoiceField(choices=Booking.ConditionStatus.choices)
    description = serializers.CharField(required=False, allow_blank=True, default="")
