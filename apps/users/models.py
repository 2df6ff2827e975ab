"""User domain models for Toolshed.

Authentication lives upstream of this service, so ``User`` is a plain
domain model rather than a Django auth user. Two fields are owned by other
apps: ``reputation_score`` is written only by the reputation aggregator and
``wallet_balance`` only by the finances ledger.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def default_reputation_score() -> float:
    return settings.DEFAULT_REPUTATION_SCORE


class User(models.Model):
    """Marketplace participant."""

    class Role(models.TextChoices):
        ADMIN = "ADMIN", _("Admin")
        RENTER = "RENTER", _("Renter")
        SUPPLIER = "SUPPLIER", _("Supplier")

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", _("Active")
        INACTIVE = "INACTIVE", _("Inactive")

    class SubscriptionTier(models.TextChoices):
        FREE = "FREE", _("Free")
        PRO = "PRO", _("Pro")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=150)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.RENTER)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ACTIVE)
    reputation_score = models.FloatField(
        default=default_reputation_score,
        validators=[MinValueValidator(0.0), MaxValueValidator(5.0)],
    )
    wallet_balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    subscription_tier = models.CharField(
        max_length=8,
        choices=SubscriptionTier.choices,
        default=SubscriptionTier.FREE,
    )
    subscription_started_at = models.DateTimeField(null=True, blank=True)
    subscription_ended_at = models.DateTimeField(null=True, blank=True)
    subscription_reference = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(wallet_balance__gte=0),
                name="user_wallet_balance_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_role_display()})"

    # --- Domain helpers ------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE

    def is_pro_member(self, now=None) -> bool:
        """PRO until the subscription end date passes (no end date = lifetime)."""
        if self.subscription_tier != self.SubscriptionTier.PRO:
            return False
        if self.subscription_ended_at is None:
            return True
        return (now or timezone.now()) < self.subscription_ended_at

    def credit_wallet(self, amount: Decimal) -> None:
        self.wallet_balance = (self.wallet_balance or Decimal("0.00")) + amount

    def debit_wallet(self, amount: Decimal) -> Decimal:
        """Debit up to ``amount``; the balance never goes below zero. Returns what was debited."""
        current = self.wallet_balance or Decimal("0.00")
        debited = min(current, amount)
        self.wallet_balance = current - debited
        return debited
