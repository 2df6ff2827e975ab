"""API views for payments, payouts and owner earnings.

Payment state is only ever changed by the gateway webhook; the checkout
endpoints just open hosted sessions and hand back the redirect URL.
"""

from __future__ import annotations

import logging

from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import earnings, services
from .serializers import (
    CheckoutRequestSerializer,
    CheckoutSessionSerializer,
    DepositCheckoutRequestSerializer,
    EarningsSummarySerializer,
    PayoutRequestSerializer,
    PayoutSerializer,
    ProCheckoutRequestSerializer,
    WalletSerializer,
)

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ViewSet):
    """Checkout sessions and the gateway webhook."""

    @action(detail=False, methods=["post"])
    def checkout(self, request):  # type: ignore
        serializer = CheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        session = services.create_checkout_session(
            data["booking_id"],
            amount=data.get("amount"),
            description=data.get("description", ""),
        )
        return Response(CheckoutSessionSerializer(session).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="deposit-checkout")
    def deposit_checkout(self, request):  # type: ignore
        serializer = DepositCheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = services.create_deposit_checkout_session(serializer.validated_data["booking_id"])
        return Response(CheckoutSessionSerializer(session).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="pro-checkout")
    def pro_checkout(self, request):  # type: ignore
        serializer = ProCheckoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.create_pro_checkout_session(serializer.validated_data["user_id"])
        return Response(result, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def webhook(self, request):  # type: ignore
        # the raw body is what the signature covers, so request.data is never touched
        signature = request.META.get("HTTP_STRIPE_SIGNATURE", "")
        outcome = services.handle_webhook(request.body, signature)
        return Response(outcome, status=status.HTTP_200_OK)


class OwnerFinanceViewSet(viewsets.ViewSet):
    """Wallet, payouts and earnings of one owner (``pk`` is the user id)."""

    @action(detail=True, methods=["get"])
    def earnings(self, request, pk=None):  # type: ignore
        summary = earnings.get_owner_earnings(pk)
        return Response(EarningsSummarySerializer(summary).data)

    @action(detail=True, methods=["get"])
    def wallet(self, request, pk=None):  # type: ignore
        return Response(WalletSerializer(services.get_wallet(pk)).data)

    @action(detail=True, methods=["get", "post"])
    def payouts(self, request, pk=None):  # type: ignore
        if request.method == "GET":
            history = services.get_payout_history(pk)
            return Response(PayoutSerializer(history, many=True).data)

        serializer = PayoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payout = services.request_payout(pk, serializer.validated_data["amount"])
        return Response(PayoutSerializer(payout).data, status=status.HTTP_201_CREATED)
