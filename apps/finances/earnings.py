"""
Owner earnings

Read-only aggregation over settled rentals: a booking counts once it is
both COMPLETED and paid, and is attributed to the month its rental ended.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from django.db.models import Count, Sum  # type: ignore
from django.db.models.functions import ExtractMonth, ExtractYear  # type: ignore

from apps.bookings.models import Booking
from apps.users.services import get_user


@dataclass(frozen=True)
class MonthlyEarnings:
    year: int
    month: int
    total: Decimal
    bookings: int


@dataclass(frozen=True)
class EarningsSummary:
    owner_id: UUID
    total: Decimal
    months: list[MonthlyEarnings] = field(default_factory=list)


def get_monthly_earnings(owner_id: UUID) -> list[MonthlyEarnings]:
    """Earnings per (year, month) of end date, oldest month first."""
    get_user(owner_id)
    rows = (
        Booking.objects.filter(
            owner_id=owner_id,
            status=Booking.Status.COMPLETED,
            payment_status=Booking.PaymentStatus.COMPLETED,
        )
        .annotate(year=ExtractYear("end_date"), month=ExtractMonth("end_date"))
        .values("year", "month")
        .annotate(total=Sum("total_price"), bookings=Count("id"))
        .order_by("year", "month")
    )
    return [
        MonthlyEarnings(
            year=row["year"],
            month=row["month"],
            total=row["total"] or Decimal("0.00"),
            bookings=row["bookings"],
        )
        for row in rows
    ]


def get_owner_earnings(owner_id: UUID) -> EarningsSummary:
    months = get_monthly_earnings(owner_id)
    total = sum((m.total for m in months), Decimal("0.00"))
    return EarningsSummary(owner_id=owner_id, total=total, months=months)
