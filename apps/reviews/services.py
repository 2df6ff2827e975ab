"""Review services.

Reviews open once a booking is COMPLETED. A tool review refreshes the tool
rating inside the same transaction; a review about a user is announced with
``ReviewSubmitted`` and the reputation is recomputed after commit.
"""

from __future__ import annotations

import logging
from uuid import UUID

from django.db import IntegrityError, transaction  # type: ignore

from apps.bookings.models import Booking
from apps.users.models import User
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    BookingNotComplete,
    BookingNotFound,
    DuplicateReview,
    InvalidRating,
    NotBookingParticipant,
    NotReviewAuthor,
    ReviewNotFound,
    UserNotFound,
)

from .events import ReviewSubmitted
from .models import Review, ReviewType
from .reputation import refresh_tool_rating
from .targets import resolve_review_target

logger = logging.getLogger(__name__)


def validate_rating(rating) -> int:
    # bool is an int subclass; True is not a rating
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise InvalidRating()
    return rating


def _announce(review: Review) -> None:
    if review.is_tool_review:
        refresh_tool_rating(review.target_tool_id)
        return
    review.add_event(
        ReviewSubmitted(
            aggregate_id=review.id,
            review_id=review.id,
            review_type=review.review_type,
            target_user_id=review.target_user_id,
            rating=review.rating,
        )
    )


def create_review(
    booking_id: UUID,
    reviewer_id: UUID,
    rating: int,
    comment: str = "",
    review_type: str | None = None,
) -> Review:
    validate_rating(rating)

    with DjangoUnitOfWork() as uow:
        try:
            booking = Booking.objects.get(pk=booking_id)
        except Booking.DoesNotExist:
            raise BookingNotFound(f"Booking not found: {booking_id}")
        try:
            reviewer = User.objects.get(pk=reviewer_id)
        except User.DoesNotExist:
            raise UserNotFound(f"User not found: {reviewer_id}")

        if not booking.is_participant(reviewer.id):
            raise NotBookingParticipant()
        if booking.status != Booking.Status.COMPLETED:
            raise BookingNotComplete()

        target = resolve_review_target(booking, reviewer.id, review_type)
        if Review.objects.filter(booking=booking, review_type=target.review_type).exists():
            raise DuplicateReview()

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    booking=booking,
                    reviewer=reviewer,
                    review_type=target.review_type,
                    target_tool_id=target.tool_id,
                    target_user_id=target.user_id,
                    rating=rating,
                    comment=comment or "",
                )
        except IntegrityError:
            # lost the race against a concurrent review of the same type
            raise DuplicateReview()

        _announce(review)
        uow.collect_events(review)

    logger.info(f"Review {review.id} ({review.review_type}, {rating}/5) left on booking {booking.id}")
    return review


def update_review(review_id: UUID, reviewer_id: UUID, rating: int, comment: str | None = None) -> Review:
    with DjangoUnitOfWork() as uow:
        try:
            review = Review.objects.select_for_update().get(pk=review_id)
        except Review.DoesNotExist:
            raise ReviewNotFound(f"Review not found: {review_id}")
        if str(review.reviewer_id) != str(reviewer_id):
            raise NotReviewAuthor()
        validate_rating(rating)

        review.rating = rating
        if comment is not None:
            review.comment = comment
        review.save(update_fields=["rating", "comment", "updated_at"])
        _announce(review)
        uow.collect_events(review)

    logger.info(f"Review {review.id} updated to {rating}/5")
    return review


def reviews_for_tool(tool_id: UUID):
    return Review.objects.filter(target_tool_id=tool_id, review_type=ReviewType.RENTER_TO_TOOL)


def reviews_for_user(user_id: UUID):
    return Review.objects.filter(target_user_id=user_id)
