"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange, Money


# ===== Booking Events =====

@dataclass
class BookingCreated(DomainEvent):
    """Event: A renter requested a tool (-> PENDING)"""
    booking_id: UUID
    tool_id: UUID
    renter_id: UUID
    owner_id: UUID
    dates: DateRange
    total_price: Money


@dataclass
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled before it started

    Triggers:
    - A pending refund entry in the payment ledger when the booking was paid
    """
    booking_id: UUID
    cancelled_by: UUID
    refund_percentage: int
    refund_amount: Money
    was_paid: bool = False


@dataclass
class BookingCompleted(DomainEvent):
    """Event: Rental period is over (-> COMPLETED)"""
    booking_id: UUID
    tool_id: UUID
    renter_id: UUID
    owner_id: UUID
