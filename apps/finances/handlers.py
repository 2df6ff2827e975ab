"""Event handlers wired up by ``FinancesConfig.ready()``."""

from __future__ import annotations

import logging

from apps.bookings.domain.events import BookingCancelled
from shared.application.message_bus import message_bus

from .models import PaymentTransaction

logger = logging.getLogger(__name__)


def record_refund_on_cancellation(event: BookingCancelled) -> None:
    """Queue the renter refund of a paid booking in the payment ledger."""
    if not event.was_paid or event.refund_amount.amount <= 0:
        return
    PaymentTransaction.objects.create(
        booking_id=event.booking_id,
        kind=PaymentTransaction.Kind.REFUND,
        amount=event.refund_amount.amount,
        event="booking_cancelled",
        status=PaymentTransaction.Status.PENDING,
    )
    logger.info(f"Refund of {event.refund_amount} queued for booking {event.booking_id}")


def register_handlers() -> None:
    message_bus.register_event_handler(BookingCancelled, record_refund_on_cancellation)
