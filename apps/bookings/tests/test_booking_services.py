"""Admission and lifecycle services against the database."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings import services
from apps.bookings.domain.events import BookingCreated
from apps.bookings.models import Booking
from apps.users.models import User
from shared.domain.exceptions import (
    ConditionAlreadyReported,
    DepositNotRequired,
    InvalidDateRange,
    InvalidTransition,
    NotBookingParticipant,
    OverlapConflict,
    PaymentAlreadyCompleted,
    RenterNotFound,
    ToolNotFound,
)
from shared.tests.factories import make_booking, make_tool, make_user


class CreateBookingTests(TestCase):
    def setUp(self) -> None:
        self.today = timezone.localdate()
        self.owner = make_user(User.Role.SUPPLIER)
        self.renter = make_user()
        self.tool = make_tool(owner=self.owner, price_per_day="10.00")

    def _book(self, offset: int, days: int, renter=None) -> Booking:
        start = self.today + timedelta(days=offset)
        return services.create_booking(
            self.tool.id,
            (renter or self.renter).id,
            start,
            start + timedelta(days=days - 1),
        )

    def test_creates_pending_booking_with_fixed_price(self) -> None:
        booking = self._book(offset=5, days=3)

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.PENDING)
        self.assertEqual(booking.deposit_status, Booking.DepositStatus.NOT_REQUIRED)
        self.assertEqual(booking.total_price, Decimal("30.00"))
        self.assertEqual(booking.owner_id, self.owner.id)

    def test_pro_renter_gets_discount(self) -> None:
        pro = make_user(
            subscription_tier=User.SubscriptionTier.PRO,
            subscription_started_at=timezone.now(),
        )

        booking = self._book(offset=5, days=3, renter=pro)

        self.assertEqual(booking.total_price, Decimal("28.50"))

    def test_booking_may_start_today(self) -> None:
        booking = self._book(offset=0, days=1)

        self.assertEqual(booking.start_date, self.today)

    def test_rejects_past_start(self) -> None:
        with self.assertRaises(InvalidDateRange):
            self._book(offset=-1, days=3)

    def test_rejects_end_before_start(self) -> None:
        start = self.today + timedelta(days=5)
        with self.assertRaises(InvalidDateRange):
            services.create_booking(self.tool.id, self.renter.id, start, start - timedelta(days=1))

    def test_unknown_references(self) -> None:
        start = self.today + timedelta(days=5)
        with self.assertRaises(ToolNotFound):
            services.create_booking(self.renter.id, self.renter.id, start, start)
        with self.assertRaises(RenterNotFound):
            services.create_booking(self.tool.id, self.tool.id, start, start)

    def test_withdrawn_tool_is_not_bookable(self) -> None:
        self.tool.deactivate()

        with self.assertRaises(ToolNotFound):
            self._book(offset=5, days=1)

    def test_overlap_is_rejected(self) -> None:
        self._book(offset=5, days=3)

        with self.assertRaises(OverlapConflict):
            self._book(offset=6, days=3, renter=make_user())
        self.assertEqual(Booking.objects.count(), 1)

    def test_same_day_handoff_conflicts(self) -> None:
        self._book(offset=5, days=3)

        with self.assertRaises(OverlapConflict):
            self._book(offset=7, days=2, renter=make_user())

    def test_adjacent_ranges_are_fine(self) -> None:
        self._book(offset=5, days=3)

        second = self._book(offset=8, days=2, renter=make_user())

        self.assertEqual(second.status, Booking.Status.PENDING)

    def test_cancelled_and_rejected_bookings_free_their_dates(self) -> None:
        first = self._book(offset=5, days=3)
        services.cancel_booking(first.id, self.renter.id)
        second = self._book(offset=5, days=3, renter=make_user())
        services.reject_booking(second.id, self.owner.id)

        third = self._book(offset=5, days=3, renter=make_user())

        self.assertEqual(third.status, Booking.Status.PENDING)

    def test_created_event_published_after_commit(self) -> None:
        with mock.patch("shared.application.message_bus.message_bus.publish_events") as publish:
            with self.captureOnCommitCallbacks(execute=True):
                booking = self._book(offset=5, days=3)

        (events,), _ = publish.call_args
        self.assertEqual(len(events), 1)
        self.assertIsInstance(events[0], BookingCreated)
        self.assertEqual(events[0].booking_id, booking.id)


class BookingLifecycleTests(TestCase):
    def setUp(self) -> None:
        self.today = timezone.localdate()
        self.owner = make_user(User.Role.SUPPLIER)
        self.renter = make_user()
        self.tool = make_tool(owner=self.owner, price_per_day="10.00")

    def _future_booking(self, lead_days: int = 10, **fields) -> Booking:
        return make_booking(
            tool=self.tool,
            renter=self.renter,
            start_date=self.today + timedelta(days=lead_days),
            **fields,
        )

    def _finished_booking(self, **fields) -> Booking:
        return make_booking(
            tool=self.tool,
            renter=self.renter,
            start_date=self.today - timedelta(days=5),
            **fields,
        )

    def test_owner_decides_pending_requests_only(self) -> None:
        booking = self._future_booking()

        services.approve_booking(booking.id, self.owner.id)

        with self.assertRaises(InvalidTransition):
            services.reject_booking(booking.id, self.owner.id)
        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.Status.APPROVED)

    def test_renter_cannot_approve(self) -> None:
        booking = self._future_booking()

        with self.assertRaises(NotBookingParticipant):
            services.approve_booking(booking.id, self.renter.id)

    def test_mark_paid_credits_owner_once(self) -> None:
        booking = self._future_booking()

        services.mark_paid(booking.id)
        with self.assertRaises(PaymentAlreadyCompleted):
            services.mark_paid(booking.id)

        booking.refresh_from_db()
        self.owner.refresh_from_db()
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.COMPLETED)
        self.assertIsNotNone(booking.paid_at)
        self.assertEqual(self.owner.wallet_balance, Decimal("30.00"))

    def test_cancelled_booking_cannot_be_paid(self) -> None:
        booking = self._future_booking(lead_days=1)
        services.cancel_booking(booking.id, self.renter.id)

        with self.assertRaises(InvalidTransition):
            services.mark_paid(booking.id)

    def test_cancel_ten_days_ahead_refunds_everything(self) -> None:
        booking = self._future_booking(lead_days=10)

        booking = services.cancel_booking(booking.id, self.renter.id)

        self.assertEqual(booking.status, Booking.Status.CANCELLED)
        self.assertEqual(booking.refund_percentage, 100)
        self.assertEqual(booking.refund_amount, Decimal("30.00"))
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.REFUNDED)
        self.assertIsNotNone(booking.cancelled_at)

    def test_cancel_one_day_ahead_refunds_nothing(self) -> None:
        booking = self._future_booking(lead_days=1)

        booking = services.cancel_booking(booking.id, self.owner.id)

        self.assertEqual(booking.refund_amount, Decimal("0.00"))
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.PENDING)

    def test_refund_of_paid_booking_is_taken_from_owner_wallet(self) -> None:
        booking = self._future_booking(lead_days=4)
        services.mark_paid(booking.id)

        services.cancel_booking(booking.id, self.renter.id)

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal("15.00"))

    def test_refund_debit_never_drives_wallet_negative(self) -> None:
        booking = self._future_booking(lead_days=10)
        services.mark_paid(booking.id)
        User.objects.filter(pk=self.owner.pk).update(wallet_balance=Decimal("5.00"))

        services.cancel_booking(booking.id, self.renter.id)

        self.owner.refresh_from_db()
        self.assertEqual(self.owner.wallet_balance, Decimal("0.00"))

    def test_stranger_cannot_cancel(self) -> None:
        booking = self._future_booking()

        with self.assertRaises(NotBookingParticipant):
            services.cancel_booking(booking.id, make_user().id)

    def test_damage_report_requires_deposit(self) -> None:
        booking = self._finished_booking(status=Booking.Status.COMPLETED)

        booking = services.report_condition(booking.id, self.renter.id, "BROKEN", "motor burnt out")

        self.assertEqual(booking.deposit_status, Booking.DepositStatus.REQUIRED)
        self.assertEqual(booking.deposit_amount, Decimal("50.00"))
        self.assertEqual(booking.condition_reported_by_id, self.renter.id)
        with self.assertRaises(ConditionAlreadyReported):
            services.report_condition(booking.id, self.owner.id, "OK")

    def test_clean_return_needs_no_deposit(self) -> None:
        booking = self._finished_booking(status=Booking.Status.ACTIVE)

        booking = services.report_condition(booking.id, self.owner.id, "USED")

        self.assertEqual(booking.deposit_status, Booking.DepositStatus.NOT_REQUIRED)
        with self.assertRaises(DepositNotRequired):
            services.mark_deposit_paid(booking.id)

    def test_condition_cannot_be_reported_during_rental(self) -> None:
        booking = self._future_booking(status=Booking.Status.APPROVED)

        with self.assertRaises(InvalidTransition):
            services.report_condition(booking.id, self.renter.id, "OK")

    def test_deposit_is_paid_once(self) -> None:
        booking = self._finished_booking(status=Booking.Status.COMPLETED)
        services.report_condition(booking.id, self.owner.id, "MISSING_PARTS")

        booking = services.mark_deposit_paid(booking.id)

        self.assertEqual(booking.deposit_status, Booking.DepositStatus.PAID)
        self.assertIsNotNone(booking.deposit_paid_at)
        with self.assertRaises(DepositNotRequired):
            services.mark_deposit_paid(booking.id)

    def test_complete_requires_finished_period(self) -> None:
        running = make_booking(
            tool=self.tool,
            start_date=self.today - timedelta(days=1),
            days=3,
            status=Booking.Status.ACTIVE,
        )
        with self.assertRaises(InvalidTransition):
            services.complete_booking(running.id)

        finished = self._finished_booking(status=Booking.Status.APPROVED)
        finished = services.complete_booking(finished.id)
        self.assertEqual(finished.status, Booking.Status.COMPLETED)


class PeriodicLifecycleTests(TestCase):
    def setUp(self) -> None:
        self.today = timezone.localdate()
        self.tool = make_tool()

    def test_activate_started_bookings(self) -> None:
        started = make_booking(tool=self.tool, start_date=self.today, status=Booking.Status.APPROVED)
        future = make_booking(
            tool=self.tool,
            start_date=self.today + timedelta(days=5),
            status=Booking.Status.APPROVED,
        )
        pending = make_booking(tool=self.tool, start_date=self.today - timedelta(days=1), days=5)

        self.assertEqual(services.activate_started_bookings(), 1)

        statuses = dict(Booking.objects.values_list("id", "status"))
        self.assertEqual(statuses[started.id], Booking.Status.ACTIVE)
        self.assertEqual(statuses[future.id], Booking.Status.APPROVED)
        self.assertEqual(statuses[pending.id], Booking.Status.PENDING)

    def test_complete_finished_bookings(self) -> None:
        past = self.today - timedelta(days=10)
        finished = make_booking(tool=self.tool, start_date=past, status=Booking.Status.ACTIVE)
        cancelled = make_booking(tool=self.tool, start_date=past, status=Booking.Status.CANCELLED)

        self.assertEqual(services.complete_finished_bookings(), 1)

        finished.refresh_from_db()
        cancelled.refresh_from_db()
        self.assertEqual(finished.status, Booking.Status.COMPLETED)
        self.assertEqual(cancelled.status, Booking.Status.CANCELLED)
