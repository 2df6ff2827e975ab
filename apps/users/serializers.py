"""Serializers for marketplace users."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Public profile. Reputation, wallet and subscription are read-only."""

    is_pro_member = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "status",
            "reputation_score",
            "wallet_balance",
            "subscription_tier",
            "is_pro_member",
            "created_at",
        ]
        read_only_fields = [
            "id",
            "reputation_score",
            "wallet_balance",
            "subscription_tier",
            "is_pro_member",
            "created_at",
        ]

    def get_is_pro_member(self, obj: User) -> bool:
        return obj.is_pro_member()


class SubscriptionStatusSerializer(serializers.Serializer):
    tier = serializers.CharField()
    active = serializers.BooleanField()
    started_at = serializers.DateTimeField(allow_null=True)
    ended_at = serializers.DateTimeField(allow_null=True)
    discount_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
