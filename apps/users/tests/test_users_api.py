"""Integration tests for user and subscription endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone  # type: ignore
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User
from apps.users.services import activate_pro_subscription, discount_percentage
from shared.domain.exceptions import SubscriptionAlreadyActive
from shared.tests.factories import make_user


class UserAPITests(APITestCase):
    def test_register_user_with_defaults(self) -> None:
        response = self.client.post(
            reverse("user-list"),
            {"name": "Ana", "email": "ana@example.com", "role": "SUPPLIER", "reputation_score": 1.0},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["reputation_score"], 5.0)
        self.assertEqual(response.data["wallet_balance"], "0.00")
        self.assertFalse(response.data["is_pro_member"])

    def test_duplicate_email_is_rejected(self) -> None:
        make_user(email="ana@example.com")

        response = self.client.post(
            reverse("user-list"),
            {"name": "Ana", "email": "ana@example.com"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_subscription_status_and_cancel(self) -> None:
        user = make_user()
        url = reverse("user-subscription", args=[user.id])

        self.assertFalse(self.client.get(url).data["active"])
        not_active = self.client.delete(url)
        self.assertEqual(not_active.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(not_active.data["code"], "SubscriptionNotActive")

        activate_pro_subscription(user.id, reference="cs_123")
        active = self.client.get(url)
        self.assertTrue(active.data["active"])
        self.assertEqual(active.data["discount_percentage"], "5.00")

        cancelled = self.client.delete(url)
        self.assertEqual(cancelled.status_code, status.HTTP_200_OK)
        self.assertFalse(cancelled.data["active"])
        self.assertIsNotNone(cancelled.data["ended_at"])


class SubscriptionRulesTests(APITestCase):
    def test_cannot_activate_twice(self) -> None:
        user = make_user()
        activate_pro_subscription(user.id, reference="cs_1")

        with self.assertRaises(SubscriptionAlreadyActive):
            activate_pro_subscription(user.id, reference="cs_2")

    def test_pro_with_future_end_date_is_still_member(self) -> None:
        user = make_user(
            subscription_tier=User.SubscriptionTier.PRO,
            subscription_ended_at=timezone.now() + timedelta(days=3),
        )

        self.assertTrue(user.is_pro_member())
        self.assertEqual(discount_percentage(user), Decimal("5"))

    def test_expired_pro_is_not_member(self) -> None:
        user = make_user(
            subscription_tier=User.SubscriptionTier.PRO,
            subscription_ended_at=timezone.now() - timedelta(days=1),
        )

        self.assertFalse(user.is_pro_member())
        self.assertEqual(discount_percentage(user), Decimal("0"))

    def test_wallet_debit_is_clamped(self) -> None:
        user = make_user(wallet_balance=Decimal("10.00"))

        debited = user.debit_wallet(Decimal("25.00"))

        self.assertEqual(debited, Decimal("10.00"))
        self.assertEqual(user.wallet_balance, Decimal("0.00"))
