"""Integration tests for review endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone  # type: ignore
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.users.models import User
from shared.tests.factories import make_booking, make_tool, make_user


class ReviewAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = make_user(User.Role.SUPPLIER)
        self.renter = make_user()
        self.tool = make_tool(owner=self.owner)
        self.booking = make_booking(
            tool=self.tool,
            renter=self.renter,
            start_date=timezone.localdate() - timedelta(days=7),
            status=Booking.Status.COMPLETED,
        )
        self.list_url = reverse("review-list")

    def _post(self, **payload):
        data = {"booking_id": str(self.booking.id), "reviewer_id": str(self.renter.id), "rating": 5}
        data.update(payload)
        return self.client.post(self.list_url, data, format="json")

    def test_create_and_list_tool_reviews(self) -> None:
        response = self._post(comment="Great drill")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["review_type"], "RENTER_TO_TOOL")
        self.assertEqual(response.data["target_tool_id"], str(self.tool.id))

        listing = self.client.get(self.list_url, {"target_tool": str(self.tool.id)})
        self.assertEqual(len(listing.data), 1)

    def test_duplicate_is_a_conflict(self) -> None:
        self._post()

        response = self._post(rating=1)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "DuplicateReview")

    def test_out_of_range_rating(self) -> None:
        response = self._post(rating=7)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "InvalidRating")

    def test_only_author_may_edit(self) -> None:
        review_id = self._post().data["id"]

        response = self.client.patch(
            reverse("review-detail", args=[review_id]),
            {"reviewer_id": str(self.owner.id), "rating": 1},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "NotReviewAuthor")

    def test_recalculate_reputations(self) -> None:
        response = self.client.post(reverse("review-recalculate-reputations"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"changed": 0})
