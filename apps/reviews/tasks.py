"""Celery tasks for the review domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .reputation import recalculate_all_reputations as recalculate

logger = logging.getLogger(__name__)


@shared_task(name="reviews.recalculate_all_reputations")
def recalculate_all_reputations() -> dict[str, int]:
    """
    Nightly full recompute of user reputation scores.

    Catches up with anything the per-review refresh missed (handler
    failures, reviews deleted through the admin).

    Returns:
        dict: {"changed": number of scores that changed}
    """
    return {"changed": recalculate()}
