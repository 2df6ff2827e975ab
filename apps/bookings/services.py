"""Booking admission and lifecycle services.

Every state change runs inside ``DjangoUnitOfWork``: the booking row is
locked with ``select_for_update`` for the read-modify-write, and the domain
events the booking recorded are published only after commit.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable
from uuid import UUID

from django.db.models import QuerySet  # type: ignore
from django.utils import timezone  # type: ignore

from apps.tools.models import Tool
from apps.users.models import User
from apps.users.services import discount_percentage
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    BookingNotFound,
    InvalidDateRange,
    InvalidTransition,
    NotBookingParticipant,
    OverlapConflict,
    RenterNotFound,
    ToolNotFound,
)
from shared.domain.value_objects import DateRange

from .domain.events import BookingCreated
from .domain.pricing import quote_rental
from .models import Booking

logger = logging.getLogger(__name__)


def get_booking(booking_id: UUID, *, lock: bool = False) -> Booking:
    qs = Booking.objects.select_for_update() if lock else Booking.objects.all()
    try:
        return qs.get(pk=booking_id)
    except Booking.DoesNotExist:
        raise BookingNotFound(f"Booking not found: {booking_id}")


def _validated_dates(start_date: date, end_date: date, today: date) -> DateRange:
    if start_date < today or end_date < today or end_date < start_date:
        raise InvalidDateRange()
    return DateRange(start_date, end_date)


def has_overlapping_booking(tool: Tool, dates: DateRange) -> bool:
    """Inclusive overlap against every booking that still holds its dates."""
    return (
        Booking.objects.filter(
            tool=tool,
            start_date__lte=dates.end_date,
            end_date__gte=dates.start_date,
        )
        .exclude(status__in=Booking.NON_BLOCKING_STATUSES)
        .exists()
    )


def create_booking(
    tool_id: UUID,
    renter_id: UUID,
    start_date: date,
    end_date: date,
    *,
    today: date | None = None,
) -> Booking:
    """
    Admit a rental request.

    The tool row stays locked from the overlap check until the insert
    commits, so two requests for the same tool are admitted one at a time.
    """
    today = today or timezone.localdate()
    dates = _validated_dates(start_date, end_date, today)

    with DjangoUnitOfWork() as uow:
        try:
            tool = Tool.objects.select_for_update().get(pk=tool_id)
        except Tool.DoesNotExist:
            raise ToolNotFound(f"Tool not found: {tool_id}")
        if not tool.active:
            raise ToolNotFound(f"Tool {tool_id} is no longer listed")

        try:
            renter = User.objects.get(pk=renter_id)
        except User.DoesNotExist:
            raise RenterNotFound(f"Renter not found: {renter_id}")

        if has_overlapping_booking(tool, dates):
            logger.info(f"Rejected overlapping request for tool {tool.id}: {dates}")
            raise OverlapConflict()

        quote = quote_rental(tool.price_per_day, dates, discount_percentage(renter))
        booking = Booking.objects.create(
            tool=tool,
            renter=renter,
            owner_id=tool.owner_id,
            start_date=dates.start_date,
            end_date=dates.end_date,
            total_price=quote.total.amount,
        )
        booking.add_event(
            BookingCreated(
                aggregate_id=booking.id,
                booking_id=booking.id,
                tool_id=tool.id,
                renter_id=renter.id,
                owner_id=tool.owner_id,
                dates=dates,
                total_price=quote.total,
            )
        )
        uow.collect_events(booking)

    logger.info(
        f"Booking {booking.id} created for tool {tool.id}: {dates} "
        f"({quote.days} days, total {quote.total})"
    )
    return booking


def _transition(booking_id: UUID, apply: Callable[[Booking], object]) -> Booking:
    with DjangoUnitOfWork() as uow:
        booking = get_booking(booking_id, lock=True)
        apply(booking)
        booking.save()
        uow.collect_events(booking)
    return booking


def _require_owner(booking: Booking, actor_id: UUID | None) -> None:
    if actor_id is not None and str(actor_id) != str(booking.owner_id):
        raise NotBookingParticipant("Only the tool owner can decide on a booking request.")


def approve_booking(booking_id: UUID, actor_id: UUID | None = None) -> Booking:
    def apply(booking: Booking):
        _require_owner(booking, actor_id)
        booking.approve()

    booking = _transition(booking_id, apply)
    logger.info(f"Booking {booking.id} approved")
    return booking


def reject_booking(booking_id: UUID, actor_id: UUID | None = None) -> Booking:
    def apply(booking: Booking):
        _require_owner(booking, actor_id)
        booking.reject()

    booking = _transition(booking_id, apply)
    logger.info(f"Booking {booking.id} rejected")
    return booking


def activate_booking(booking_id: UUID, *, today: date | None = None) -> Booking:
    booking = _transition(booking_id, lambda b: b.activate(today))
    logger.info(f"Booking {booking.id} is now active")
    return booking


def complete_booking(booking_id: UUID, *, today: date | None = None) -> Booking:
    booking = _transition(booking_id, lambda b: b.complete(today))
    logger.info(f"Booking {booking.id} completed")
    return booking


def mark_paid(booking_id: UUID) -> Booking:
    """Settle the rental payment and credit the owner's wallet atomically."""

    def apply(booking: Booking):
        booking.mark_paid()
        owner = User.objects.select_for_update().get(pk=booking.owner_id)
        owner.credit_wallet(booking.total_price)
        owner.save(update_fields=["wallet_balance", "updated_at"])

    booking = _transition(booking_id, apply)
    logger.info(f"Booking {booking.id} paid, owner {booking.owner_id} credited {booking.total_price}")
    return booking


def report_condition(
    booking_id: UUID,
    actor_id: UUID,
    condition: str,
    description: str = "",
    *,
    today: date | None = None,
) -> Booking:
    booking = _transition(
        booking_id,
        lambda b: b.report_condition(actor_id, condition, description, today=today),
    )
    logger.info(
        f"Condition {booking.condition_status} reported for booking {booking.id}, "
        f"deposit {booking.deposit_status}"
    )
    return booking


def mark_deposit_paid(booking_id: UUID) -> Booking:
    booking = _transition(booking_id, lambda b: b.mark_deposit_paid())
    logger.info(f"Deposit of {booking.deposit_amount} paid for booking {booking.id}")
    return booking


def cancel_booking(booking_id: UUID, actor_id: UUID, *, today: date | None = None) -> Booking:
    """
    Cancel a booking before it starts.

    When the booking had already been paid, the refund is taken back from
    the owner's wallet (never below zero).
    """

    def apply(booking: Booking):
        was_paid = booking.is_paid
        refund = booking.cancel(actor_id, today=today)
        if was_paid and refund.amount > 0:
            owner = User.objects.select_for_update().get(pk=booking.owner_id)
            debited = owner.debit_wallet(refund.amount)
            owner.save(update_fields=["wallet_balance", "updated_at"])
            if debited < refund.amount:
                logger.warning(
                    f"Owner {owner.id} wallet covered only {debited} of the "
                    f"{refund.amount} refund for booking {booking.id}"
                )

    booking = _transition(booking_id, apply)
    logger.info(
        f"Booking {booking.id} cancelled by {actor_id}: "
        f"refund {booking.refund_percentage}% ({booking.refund_amount})"
    )
    return booking


# --- Periodic lifecycle --------------------------------------------------------

def activate_started_bookings(today: date | None = None) -> int:
    """Move approved bookings whose rental has started to ACTIVE."""
    today = today or timezone.localdate()
    ids = list(
        Booking.objects.filter(
            status=Booking.Status.APPROVED,
            start_date__lte=today,
            end_date__gte=today,
        ).values_list("id", flat=True)
    )
    activated = 0
    for booking_id in ids:
        try:
            activate_booking(booking_id, today=today)
        except InvalidTransition:
            # changed state since the query ran
            continue
        activated += 1
    return activated


def complete_finished_bookings(today: date | None = None) -> int:
    """Complete approved or active bookings whose end date has passed."""
    today = today or timezone.localdate()
    ids = list(
        Booking.objects.filter(
            status__in=[Booking.Status.APPROVED, Booking.Status.ACTIVE],
            end_date__lt=today,
        ).values_list("id", flat=True)
    )
    completed = 0
    for booking_id in ids:
        try:
            complete_booking(booking_id, today=today)
        except InvalidTransition:
            continue
        completed += 1
    return completed


# --- Read side -----------------------------------------------------------------

def bookings_for_renter(renter_id: UUID) -> QuerySet:
    return Booking.objects.filter(renter_id=renter_id).select_related("tool")


def bookings_for_owner(owner_id: UUID) -> QuerySet:
    return Booking.objects.filter(owner_id=owner_id).select_related("tool")


def bookings_for_tool(tool_id: UUID) -> QuerySet:
    return Booking.objects.filter(tool_id=tool_id)
