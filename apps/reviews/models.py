"""Models for the review domain.

Defines the ``Review`` entity. A completed booking can collect at most one
review of each type: the renter rates the tool and, optionally, the owner;
the owner rates the renter. The target (tool or user) is fixed when the
review is written.
"""

from __future__ import annotations

import uuid

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorderMixin


class ReviewType(models.TextChoices):
    RENTER_TO_TOOL = "RENTER_TO_TOOL", _("Renter about the tool")
    RENTER_TO_OWNER = "RENTER_TO_OWNER", _("Renter about the owner")
    OWNER_TO_RENTER = "OWNER_TO_RENTER", _("Owner about the renter")


USER_REVIEW_TYPES = (ReviewType.RENTER_TO_OWNER, ReviewType.OWNER_TO_RENTER)


class Review(EventRecorderMixin, models.Model):
    """A rating with an optional comment, written by a booking participant."""

    Type = ReviewType

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        "bookings.Booking", on_delete=models.CASCADE, related_name="reviews"
    )
    reviewer = models.ForeignKey(
        "users.User", on_delete=models.CASCADE, related_name="reviews_written"
    )
    review_type = models.CharField(max_length=20, choices=ReviewType.choices)
    target_tool = models.ForeignKey(
        "tools.Tool",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reviews",
    )
    target_user = models.ForeignKey(
        "users.User",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reviews_received",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text=_("Rating from 1 to 5"),
    )
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Review")
        verbose_name_plural = _("Reviews")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["target_user", "review_type"]),
            models.Index(fields=["target_tool"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["booking", "review_type"],
                name="review_unique_type_per_booking",
            ),
            models.CheckConstraint(
                condition=models.Q(rating__gte=1, rating__lte=5),
                name="review_rating_between_1_and_5",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(
                        review_type=ReviewType.RENTER_TO_TOOL,
                        target_tool__isnull=False,
                        target_user__isnull=True,
                    )
                    | models.Q(
                        review_type__in=USER_REVIEW_TYPES,
                        target_tool__isnull=True,
                        target_user__isnull=False,
                    )
                ),
                name="review_target_matches_type",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.get_review_type_display()} {self.rating}/5 ({self.booking_id})"

    @property
    def is_tool_review(self) -> bool:
        return self.review_type == ReviewType.RENTER_TO_TOOL
