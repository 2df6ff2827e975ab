"""Serializers for reviews.

Reviewer identity comes from the payload (``reviewer_id``); participation
and type rules are enforced by the review services, not here.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Review, ReviewType


class ReviewSerializer(serializers.ModelSerializer):
    booking_id = serializers.UUIDField(read_only=True)
    reviewer_id = serializers.UUIDField(read_only=True)
    target_tool_id = serializers.UUIDField(read_only=True, allow_null=True)
    target_user_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'booking_id',
            'reviewer_id',
            'review_type',
            'target_tool_id',
            'target_user_id',
            'rating',
            'comment',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    """Serializer for creating a new review."""

    booking_id = serializers.UUIDField()
    reviewer_id = serializers.UUIDField()
    rating = serializers.IntegerField()
    comment = serializers.CharField(required=False, allow_blank=True, default='')
    review_type = serializers.ChoiceField(choices=ReviewType.choices, required=False)


class ReviewUpdateSerializer(serializers.Serializer):
    reviewer_id = serializers.UUIDField()
    rating = serializers.IntegerField()
    comment = serializers.CharField(required=False, allow_blank=True)
