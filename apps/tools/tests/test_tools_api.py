"""Integration tests for tool listing endpoints."""

from __future__ import annotations

import uuid

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.tools.models import Tool
from apps.users.models import User
from shared.tests.factories import make_tool, make_user


class ToolAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = make_user(User.Role.SUPPLIER)
        self.list_url = reverse("tool-list")

    def _payload(self, **overrides) -> dict:
        data = {
            "owner_id": str(self.owner.id),
            "title": "Circular saw",
            "description": "1400W, 190mm blade",
            "price_per_day": "15.00",
            "district": "Porto",
            "location": "Rua de Santa Catarina 1",
        }
        data.update(overrides)
        return data

    def test_owner_can_list_a_tool(self) -> None:
        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["active"])
        self.assertEqual(response.data["num_ratings"], 0)

    def test_price_must_be_positive(self) -> None:
        response = self.client.post(self.list_url, self._payload(price_per_day="0.00"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_or_inactive_owner(self) -> None:
        missing = self.client.post(self.list_url, self._payload(owner_id=str(uuid.uuid4())), format="json")
        inactive = make_user(User.Role.SUPPLIER, status=User.Status.INACTIVE)
        blocked = self.client.post(self.list_url, self._payload(owner_id=str(inactive.id)), format="json")

        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(blocked.status_code, status.HTTP_409_CONFLICT)

    def test_filter_by_district_and_deactivate(self) -> None:
        porto = make_tool(owner=self.owner, district="Porto")
        make_tool(owner=self.owner, district="Lisboa")

        response = self.client.get(self.list_url, {"district": "Porto"})
        self.assertEqual([item["id"] for item in response.data], [str(porto.id)])

        deactivated = self.client.post(reverse("tool-deactivate", args=[porto.id]))
        self.assertFalse(deactivated.data["active"])
        self.assertFalse(Tool.objects.get(pk=porto.pk).active)

    def test_update_keeps_owner(self) -> None:
        tool = make_tool(owner=self.owner)
        other = make_user(User.Role.SUPPLIER)

        response = self.client.patch(
            reverse("tool-detail", args=[tool.id]),
            {"title": "Impact driver", "owner_id": str(other.id)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        tool.refresh_from_db()
        self.assertEqual(tool.title, "Impact driver")
        self.assertEqual(tool.owner_id, self.owner.id)


class ToolSearchAPITests(APITestCase):
    def setUp(self) -> None:
        owner = make_user(User.Role.SUPPLIER)
        self.drill = make_tool(
            owner=owner, title="Power Drill", description="Cordless 18V", price_per_day="12.00", district="Aveiro"
        )
        self.bits = make_tool(
            owner=owner, title="Bit Set", description="Titanium drill bits", price_per_day="4.00", district="Porto"
        )
        self.hammer = make_tool(
            owner=owner, title="Heavy HAMMER", description="claw hammer", price_per_day="3.00", district="Aveiro"
        )
        self.hidden = make_tool(
            owner=owner, title="Old Drill", description="retired", price_per_day="5.00", active=False
        )
        self.list_url = reverse("tool-list")

    def _ids(self, **params) -> set[str]:
        response = self.client.get(self.list_url, params)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        return {item["id"] for item in response.data}

    def test_keyword_matches_title_or_description_of_active_tools(self) -> None:
        self.assertEqual(self._ids(keyword="drill"), {str(self.drill.id), str(self.bits.id)})
        self.assertEqual(self._ids(keyword="CLAW"), {str(self.hammer.id)})
        self.assertEqual(self._ids(keyword="Screwdriver"), set())

    def test_district_is_a_substring_match(self) -> None:
        self.assertEqual(self._ids(district="avei", active="true"), {str(self.drill.id), str(self.hammer.id)})

    def test_price_range(self) -> None:
        self.assertEqual(self._ids(price_min="4", price_max="12", active="true"), {str(self.drill.id), str(self.bits.id)})

    def test_negative_prices_are_clamped_to_zero(self) -> None:
        self.assertEqual(self._ids(price_max="-5"), set())
        self.assertEqual(len(self._ids(price_min="-5")), 4)
