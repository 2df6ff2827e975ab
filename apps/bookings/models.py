"""Booking domain models for Toolshed."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorderMixin
from shared.domain.exceptions import (
    ConditionAlreadyReported,
    DepositNotRequired,
    InvalidTransition,
    NotBookingParticipant,
    PaymentAlreadyCompleted,
    ValidationFailed,
)
from shared.domain.value_objects import DateRange, Money

from .domain.events import BookingCancelled, BookingCompleted
from .domain.policies import CancellationPolicy, DamageDepositPolicy


class Booking(EventRecorderMixin, models.Model):
    """A rental of one tool for a date range, both ends inclusive."""

    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending owner decision")
        APPROVED = "APPROVED", _("Approved")
        REJECTED = "REJECTED", _("Rejected")
        ACTIVE = "ACTIVE", _("Active")
        COMPLETED = "COMPLETED", _("Completed")
        CANCELLED = "CANCELLED", _("Cancelled")

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", _("Waiting for payment")
        COMPLETED = "COMPLETED", _("Paid")
        REFUNDED = "REFUNDED", _("Refunded")

    class ConditionStatus(models.TextChoices):
        OK = "OK", _("OK")
        USED = "USED", _("Used")
        MINOR_DAMAGE = "MINOR_DAMAGE", _("Minor damage")
        BROKEN = "BROKEN", _("Broken")
        MISSING_PARTS = "MISSING_PARTS", _("Missing parts")

    class DepositStatus(models.TextChoices):
        NOT_REQUIRED = "NOT_REQUIRED", _("Not required")
        REQUIRED = "REQUIRED", _("Required")
        PAID = "PAID", _("Paid")

    NON_BLOCKING_STATUSES = (Status.CANCELLED, Status.REJECTED)
    CANCELLABLE_STATUSES = (Status.PENDING, Status.APPROVED)
    UNPAYABLE_STATUSES = (Status.CANCELLED, Status.REJECTED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tool = models.ForeignKey(
        "tools.Tool",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    renter = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        related_name="rentals",
    )
    owner = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        related_name="owned_bookings",
        help_text=_("Copy of tool.owner taken at admission; never changes."),
    )
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_status = models.CharField(
        max_length=16,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text=_("Fixed at admission."),
    )
    paid_at = models.DateTimeField(null=True, blank=True)

    condition_status = models.CharField(
        max_length=16,
        choices=ConditionStatus.choices,
        null=True,
        blank=True,
    )
    condition_description = models.TextField(blank=True)
    condition_reported_by = models.ForeignKey(
        "users.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="condition_reports",
    )
    condition_reported_at = models.DateTimeField(null=True, blank=True)

    deposit_status = models.CharField(
        max_length=16,
        choices=DepositStatus.choices,
        default=DepositStatus.NOT_REQUIRED,
    )
    deposit_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    deposit_paid_at = models.DateTimeField(null=True, blank=True)

    cancelled_at = models.DateTimeField(null=True, blank=True)
    refund_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
    )
    refund_percentage = models.PositiveSmallIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tool", "start_date", "end_date"]),
            models.Index(fields=["renter", "status"]),
            models.Index(fields=["owner", "status"]),
            models.Index(fields=["status", "end_date"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="booking_end_not_before_start",
            ),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} ({self.get_status_display()})"

    # --- Read helpers --------------------------------------------------------
    @property
    def dates(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == self.PaymentStatus.COMPLETED

    def is_participant(self, user_id) -> bool:
        return str(user_id) in (str(self.renter_id), str(self.owner_id))

    def _require_participant(self, user_id) -> None:
        if not self.is_participant(user_id):
            raise NotBookingParticipant()

    # --- Owner decision ------------------------------------------------------
    def approve(self) -> None:
        if self.status != self.Status.PENDING:
            raise InvalidTransition(f"Cannot approve a {self.status} booking.")
        self.status = self.Status.APPROVED

    def reject(self) -> None:
        if self.status != self.Status.PENDING:
            raise InvalidTransition(f"Cannot reject a {self.status} booking.")
        self.status = self.Status.REJECTED

    # --- Lifecycle -----------------------------------------------------------
    def activate(self, today=None) -> None:
        today = today or timezone.localdate()
        if self.status != self.Status.APPROVED or self.start_date > today:
            raise InvalidTransition("Only approved bookings that have started can be activated.")
        self.status = self.Status.ACTIVE

    def complete(self, today=None) -> None:
        today = today or timezone.localdate()
        if self.status not in (self.Status.APPROVED, self.Status.ACTIVE):
            raise InvalidTransition(f"Cannot complete a {self.status} booking.")
        if self.end_date >= today:
            raise InvalidTransition("Booking cannot be completed before its end date has passed.")
        self.status = self.Status.COMPLETED
        self.add_event(
            BookingCompleted(
                aggregate_id=self.id,
                booking_id=self.id,
                tool_id=self.tool_id,
                renter_id=self.renter_id,
                owner_id=self.owner_id,
            )
        )

    def cancel(self, actor_id, today=None, now=None, policy: CancellationPolicy | None = None) -> Money:
        """
        Cancel before the rental starts and work out the refund.

        Returns the refund amount; payment status becomes REFUNDED only when
        something is actually refunded.
        """
        self._require_participant(actor_id)
        today = today or timezone.localdate()
        if self.status not in self.CANCELLABLE_STATUSES:
            raise InvalidTransition(f"Cannot cancel a {self.status} booking.")
        if today >= self.start_date:
            raise InvalidTransition("Booking can only be cancelled before it starts.")

        policy = policy or CancellationPolicy()
        was_paid = self.is_paid
        percentage = policy.refund_percentage(self.start_date, today)
        refund = policy.refund_amount(self.total_price, self.start_date, today)

        self.status = self.Status.CANCELLED
        self.cancelled_at = now or timezone.now()
        self.refund_percentage = percentage
        self.refund_amount = refund.amount
        if refund.amount > 0:
            self.payment_status = self.PaymentStatus.REFUNDED

        self.add_event(
            BookingCancelled(
                aggregate_id=self.id,
                booking_id=self.id,
                cancelled_by=actor_id,
                refund_percentage=percentage,
                refund_amount=refund,
                was_paid=was_paid,
            )
        )
        return refund

    # --- Payments ------------------------------------------------------------
    def ensure_payable(self) -> None:
        if self.payment_status == self.PaymentStatus.COMPLETED:
            raise PaymentAlreadyCompleted()
        if self.payment_status == self.PaymentStatus.REFUNDED or self.status in self.UNPAYABLE_STATUSES:
            raise InvalidTransition(f"A {self.status} booking cannot be paid.")

    def mark_paid(self, now=None) -> None:
        self.ensure_payable()
        self.payment_status = self.PaymentStatus.COMPLETED
        self.paid_at = now or timezone.now()

    # --- Return and deposit --------------------------------------------------
    def can_report_condition(self, today=None) -> bool:
        today = today or timezone.localdate()
        if self.status == self.Status.COMPLETED:
            return True
        return self.status in (self.Status.APPROVED, self.Status.ACTIVE) and self.end_date < today

    def report_condition(
        self,
        actor_id,
        condition: str,
        description: str = "",
        today=None,
        now=None,
        policy: DamageDepositPolicy | None = None,
    ) -> None:
        self._require_participant(actor_id)
        if self.condition_status:
            raise ConditionAlreadyReported()
        if not self.can_report_condition(today):
            raise InvalidTransition("Condition can only be reported once the rental period is over.")
        if condition not in self.ConditionStatus.values:
            raise ValidationFailed(f"Unknown condition: {condition}")

        policy = policy or DamageDepositPolicy()
        self.condition_status = condition
        self.condition_description = description or ""
        self.condition_reported_by_id = actor_id
        self.condition_reported_at = now or timezone.now()
        if policy.requires_deposit(condition):
            self.deposit_status = self.DepositStatus.REQUIRED
            self.deposit_amount = policy.deposit_for(condition)
        else:
            self.deposit_status = self.DepositStatus.NOT_REQUIRED
            self.deposit_amount = Decimal("0.00")

    def ensure_deposit_due(self) -> None:
        if self.deposit_status != self.DepositStatus.REQUIRED:
            raise DepositNotRequired()

    def mark_deposit_paid(self, now=None) -> None:
        self.ensure_deposit_due()
        self.deposit_status = self.DepositStatus.PAID
        self.deposit_paid_at = now or timezone.now()
