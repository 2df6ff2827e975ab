"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from . import services

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat, see config/celery.py)
# ============================================================================

@shared_task(name="bookings.activate_started_bookings")
def activate_started_bookings() -> dict[str, int]:
    """
    Move approved bookings whose start date has arrived to ACTIVE.

    Runs every hour.

    Returns:
        dict: {"activated": number of bookings activated}
    """
    activated = services.activate_started_bookings()
    if activated > 0:
        logger.info(f"Activated {activated} bookings")
    return {"activated": activated}


@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Complete bookings whose end date has passed.

    Completion opens the booking for reviews. Runs every hour.

    Returns:
        dict: {"completed": number of bookings completed}
    """
    completed = services.complete_finished_bookings()
    if completed > 0:
        logger.info(f"Completed {completed} bookings")
    return {"completed": completed}
