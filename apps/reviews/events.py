"""Review domain events."""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class ReviewSubmitted(DomainEvent):
    """
    Event: A user-targeted review was written or changed

    Triggers:
    - Recompute the reviewee's reputation score
    """
    review_id: UUID
    review_type: str
    target_user_id: UUID
    rating: int
