"""
Review target resolution

Which review types a reviewer may write depends on their side of the
booking; the type in turn fixes what the review is about.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from shared.domain.exceptions import InvalidReviewType, NotBookingParticipant

from .models import ReviewType

RENTER_TYPES = (ReviewType.RENTER_TO_TOOL, ReviewType.RENTER_TO_OWNER)
OWNER_TYPES = (ReviewType.OWNER_TO_RENTER,)


@dataclass(frozen=True)
class ReviewTarget:
    review_type: str
    tool_id: UUID | None = None
    user_id: UUID | None = None


def resolve_review_target(booking, reviewer_id, requested_type: str | None = None) -> ReviewTarget:
    """
    Pick the review type for ``reviewer_id`` on ``booking`` and its target.

    Without a requested type the renter reviews the tool and the owner
    reviews the renter.
    """
    is_renter = str(reviewer_id) == str(booking.renter_id)
    is_owner = str(reviewer_id) == str(booking.owner_id)
    if not (is_renter or is_owner):
        raise NotBookingParticipant()

    allowed = (RENTER_TYPES if is_renter else ()) + (OWNER_TYPES if is_owner else ())
    if requested_type is None:
        review_type = RENTER_TYPES[0] if is_renter else OWNER_TYPES[0]
    elif requested_type in allowed:
        review_type = ReviewType(requested_type)
    else:
        raise InvalidReviewType(f"{requested_type} is not available to this reviewer.")

    if review_type == ReviewType.RENTER_TO_TOOL:
        return ReviewTarget(review_type, tool_id=booking.tool_id)
    if review_type == ReviewType.RENTER_TO_OWNER:
        return ReviewTarget(review_type, user_id=booking.owner_id)
    return ReviewTarget(review_type, user_id=booking.renter_id)
