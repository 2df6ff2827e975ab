"""Serializers for the finance domain (payments, payouts, earnings)."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .models import PaymentTransaction, Payout


class PaymentTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentTransaction
        fields = ["id", "booking", "user", "kind", "amount", "session_id", "event", "status", "created_at"]
        read_only_fields = fields


class PayoutSerializer(serializers.ModelSerializer):
    owner_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Payout
        fields = [
            "id",
            "owner_id",
            "amount",
            "status",
            "external_transfer_id",
            "failure_reason",
            "requested_at",
            "completed_at",
        ]
        read_only_fields = fields


class CheckoutRequestSerializer(serializers.Serializer):
    booking_id = serializers.UUIDField()
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01"), required=False
    )
    description = serializers.CharField(required=False, allow_blank=True, default="")


class DepositCheckoutRequestSerializer(serializers.Serializer):
    booking_id = serializers.UUIDField()


class ProCheckoutRequestSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()


class CheckoutSessionSerializer(serializers.Serializer):
    session_id = serializers.CharField(allow_null=True)
    checkout_url = serializers.CharField(allow_null=True)


class PayoutRequestSerializer(serializers.Serializer):
    # sign and balance are checked by the payout service
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)


class MonthlyEarningsSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    bookings = serializers.IntegerField()


class EarningsSummarySerializer(serializers.Serializer):
    owner_id = serializers.UUIDField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    months = MonthlyEarningsSerializer(many=True)


class WalletSerializer(serializers.Serializer):
    owner_id = serializers.UUIDField()
    balance = serializers.DecimalField(max_digits=12, decimal_places=2)
    recent_payouts = PayoutSerializer(many=True)
