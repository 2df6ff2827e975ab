"""Integration tests for payment, wallet and earnings endpoints."""

from __future__ import annotations

import time
from datetime import date
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.finances.gateway import compute_signature
from apps.finances.tests.fakes import checkout_completed
from apps.users.models import User
from shared.tests.factories import make_booking, make_tool, make_user


class PaymentAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = make_user(User.Role.SUPPLIER)
        self.booking = make_booking(tool=make_tool(owner=self.owner, price_per_day="10.00"))

    def _signed(self, payload: str) -> str:
        timestamp = int(time.time())
        return f"t={timestamp},v1={compute_signature(settings.STRIPE_WEBHOOK_SECRET, timestamp, payload)}"

    def test_checkout_returns_session(self) -> None:
        response = self.client.post(
            reverse("payment-checkout"),
            {"booking_id": str(self.booking.id)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["session_id"].startswith("cs_test_"))
        self.assertTrue(response.data["checkout_url"])

    def test_checkout_for_less_than_total_is_rejected(self) -> None:
        response = self.client.post(
            reverse("payment-checkout"),
            {"booking_id": str(self.booking.id), "amount": "0.01"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "InvalidCheckoutAmount")

    def test_signed_webhook_marks_booking_paid(self) -> None:
        payload = checkout_completed({"booking_id": str(self.booking.id), "type": "rental"})

        response = self.client.post(
            reverse("payment-webhook"),
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=self._signed(payload),
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["outcome"], "paid")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.COMPLETED)

    def test_unsigned_webhook_is_rejected(self) -> None:
        payload = checkout_completed({"booking_id": str(self.booking.id), "type": "rental"})

        response = self.client.post(
            reverse("payment-webhook"),
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE="t=1,v1=deadbeef",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "InvalidSignature")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.PENDING)

    def test_payout_and_wallet(self) -> None:
        User.objects.filter(pk=self.owner.pk).update(wallet_balance=Decimal("50.00"))

        payout = self.client.post(
            reverse("owner-finance-payouts", args=[self.owner.id]),
            {"amount": "20.00"},
            format="json",
        )
        too_much = self.client.post(
            reverse("owner-finance-payouts", args=[self.owner.id]),
            {"amount": "31.00"},
            format="json",
        )
        wallet = self.client.get(reverse("owner-finance-wallet", args=[self.owner.id]))

        self.assertEqual(payout.status_code, status.HTTP_201_CREATED, payout.data)
        self.assertEqual(payout.data["status"], "COMPLETED")
        self.assertEqual(too_much.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(too_much.data["code"], "InsufficientBalance")
        self.assertEqual(wallet.data["balance"], "30.00")
        self.assertEqual(len(wallet.data["recent_payouts"]), 1)

    def test_earnings(self) -> None:
        make_booking(
            tool=self.booking.tool,
            start_date=date(2024, 2, 1),
            status=Booking.Status.COMPLETED,
            payment_status=Booking.PaymentStatus.COMPLETED,
        )

        response = self.client.get(reverse("owner-finance-earnings", args=[self.owner.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], "30.00")
        self.assertEqual(
            [dict(m) for m in response.data["months"]],
            [{"year": 2024, "month": 2, "total": "30.00", "bookings": 1}],
        )
