"""Financial domain models for Toolshed."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class PaymentTransaction(models.Model):
    """Ledger of gateway traffic: sessions we opened and webhook events we processed."""

    class Kind(models.TextChoices):
        RENTAL = "RENTAL", _("Rental payment")
        DEPOSIT = "DEPOSIT", _("Damage deposit")
        SUBSCRIPTION = "SUBSCRIPTION", _("PRO subscription")
        REFUND = "REFUND", _("Refund owed to renter")

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        SUCCEEDED = "SUCCEEDED", _("Succeeded")
        IGNORED = "IGNORED", _("Ignored")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="payment_transactions",
    )
    user = models.ForeignKey(
        "users.User",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="payment_transactions",
    )
    kind = models.CharField(max_length=16, choices=Kind.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    session_id = models.CharField(max_length=255, blank=True)
    event_id = models.CharField(max_length=255, null=True, blank=True, unique=True)
    event = models.CharField(max_length=64, help_text=_("session_created, booking_cancelled or the webhook event type"))
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment transaction")
        verbose_name_plural = _("Payment transactions")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["session_id"]),
            models.Index(fields=["booking", "kind"]),
        ]

    def __str__(self) -> str:
        return f"{self.kind} {self.event} ({self.status})"


class Payout(models.Model):
    """Money an owner moves out of the wallet to an external account."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        COMPLETED = "COMPLETED", _("Completed")
        FAILED = "FAILED", _("Failed")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        related_name="payouts",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    external_transfer_id = models.CharField(max_length=255, blank=True)
    failure_reason = models.TextField(blank=True)
    requested_at = models.DateTimeField(default=timezone.now)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Payout")
        verbose_name_plural = _("Payouts")
        ordering = ["-requested_at"]
        indexes = [
            models.Index(fields=["owner", "-requested_at"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payout_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"Payout {self.amount} to {self.owner_id} ({self.status})"

    def mark_completed(self, transfer_id: str) -> None:
        self.status = self.Status.COMPLETED
        self.external_transfer_id = transfer_id
        self.completed_at = timezone.now()

    def mark_failed(self, reason: str) -> None:
        self.status = self.Status.FAILED
        self.failure_reason = reason
