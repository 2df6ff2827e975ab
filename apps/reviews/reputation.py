"""
Reputation and tool rating aggregation

Both aggregates are recomputed from scratch out of the stored reviews, so
running a refresh any number of times gives the same result.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Count, Sum  # type: ignore

from apps.tools.models import Tool
from apps.users.models import User

from .models import Review, ReviewType

logger = logging.getLogger(__name__)

# review types that count towards a user's score, by role
REPUTATION_SOURCES = {
    User.Role.SUPPLIER: (ReviewType.RENTER_TO_OWNER,),
    User.Role.RENTER: (ReviewType.OWNER_TO_RENTER,),
    User.Role.ADMIN: (ReviewType.RENTER_TO_OWNER, ReviewType.OWNER_TO_RENTER),
}


def _mean(total: int, count: int) -> float:
    return float((Decimal(total) / Decimal(count)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def score_from(totals: dict, role: str) -> float:
    """Mean rating over the review types relevant to ``role``; default without reviews."""
    total = count = 0
    for review_type in REPUTATION_SOURCES.get(role, ()):
        type_total, type_count = totals.get(review_type, (0, 0))
        total += type_total
        count += type_count
    if not count:
        return float(settings.DEFAULT_REPUTATION_SCORE)
    return _mean(total, count)


def _received_totals(user_ids=None) -> dict:
    """{user_id: {review_type: (sum of ratings, count)}}"""
    qs = Review.objects.filter(target_user__isnull=False)
    if user_ids is not None:
        qs = qs.filter(target_user_id__in=user_ids)
    totals: dict = defaultdict(dict)
    rows = qs.values("target_user_id", "review_type").annotate(total=Sum("rating"), n=Count("id"))
    for row in rows:
        totals[row["target_user_id"]][row["review_type"]] = (row["total"], row["n"])
    return totals


@transaction.atomic
def refresh_user_reputation(user_id: UUID) -> float:
    user = User.objects.select_for_update().get(pk=user_id)
    score = score_from(_received_totals([user.id]).get(user.id, {}), user.role)
    if user.reputation_score != score:
        user.reputation_score = score
        user.save(update_fields=["reputation_score", "updated_at"])
        logger.info(f"Reputation of user {user.id} is now {score}")
    return score


@transaction.atomic
def recalculate_all_reputations() -> int:
    """Recompute every user's score. Returns how many scores changed."""
    totals = _received_totals()
    changed = []
    for user in User.objects.select_for_update().only("id", "role", "reputation_score"):
        score = score_from(totals.get(user.id, {}), user.role)
        if user.reputation_score != score:
            user.reputation_score = score
            changed.append(user)
    if changed:
        User.objects.bulk_update(changed, ["reputation_score"])
    logger.info(f"Reputation recompute finished, {len(changed)} scores changed")
    return len(changed)


def refresh_tool_rating(tool_id: UUID) -> Tool:
    """Recompute ``overall_rating`` / ``num_ratings`` from all tool reviews."""
    stats = Review.objects.filter(
        target_tool_id=tool_id,
        review_type=ReviewType.RENTER_TO_TOOL,
    ).aggregate(total=Sum("rating"), n=Count("id"))

    count = stats["n"] or 0
    rating = _mean(stats["total"], count) if count else 0.0
    Tool.objects.filter(pk=tool_id).update(overall_rating=rating, num_ratings=count)
    logger.info(f"Tool {tool_id} rated {rating} over {count} reviews")
    return Tool.objects.get(pk=tool_id)
