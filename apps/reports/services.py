"""Report services."""

from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction  # type: ignore

from apps.bookings.models import Booking
from apps.tools.models import Tool
from apps.users.models import User
from shared.domain.exceptions import BookingNotFound, ReportNotFound, ToolNotFound, UserNotFound

from .models import Report

logger = logging.getLogger(__name__)


def get_report(report_id: UUID) -> Report:
    try:
        return Report.objects.get(pk=report_id)
    except Report.DoesNotExist:
        raise ReportNotFound(f"Report not found: {report_id}")


@transaction.atomic
def create_report(
    reporter_id: UUID,
    title: str,
    description: str,
    tool_id: UUID | None = None,
    booking_id: UUID | None = None,
) -> Report:
    if not User.objects.filter(pk=reporter_id).exists():
        raise UserNotFound(f"User not found: {reporter_id}")
    if tool_id is not None and not Tool.objects.filter(pk=tool_id).exists():
        raise ToolNotFound(f"Tool not found: {tool_id}")
    if booking_id is not None and not Booking.objects.filter(pk=booking_id).exists():
        raise BookingNotFound(f"Booking not found: {booking_id}")

    report = Report.objects.create(
        reporter_id=reporter_id,
        tool_id=tool_id,
        booking_id=booking_id,
        title=title,
        description=description,
    )
    logger.info(f"Report {report.id} filed by {reporter_id}")
    return report


def list_reports(status: str | None = None):
    qs = Report.objects.all()
    if status:
        qs = qs.filter(status=status)
    return qs


def update_report_status(report_id: UUID, status: str) -> Report:
    report = get_report(report_id)
    report.status = status
    report.save(update_fields=["status", "updated_at"])
    logger.info(f"Report {report.id} moved to {status}")
    return report


def delete_report(report_id: UUID) -> None:
    get_report(report_id).delete()
    logger.info(f"Report {report_id} deleted")
