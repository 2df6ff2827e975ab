"""Report CRUD."""

from __future__ import annotations

import uuid

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.reports import services
from apps.reports.models import Report
from shared.domain.exceptions import BookingNotFound, ReportNotFound, ToolNotFound, UserNotFound
from shared.tests.factories import make_tool, make_user


@pytest.fixture
def reporter(db):
    return make_user()


@pytest.mark.django_db
def test_new_report_is_open(reporter):
    tool = make_tool()

    report = services.create_report(reporter.id, "Broken listing", "Photos missing", tool_id=tool.id)

    assert report.status == Report.Status.OPEN
    assert report.tool_id == tool.id


@pytest.mark.django_db
def test_dangling_references_are_rejected(reporter):
    with pytest.raises(UserNotFound):
        services.create_report(uuid.uuid4(), "t", "d")
    with pytest.raises(ToolNotFound):
        services.create_report(reporter.id, "t", "d", tool_id=uuid.uuid4())
    with pytest.raises(BookingNotFound):
        services.create_report(reporter.id, "t", "d", booking_id=uuid.uuid4())
    assert not Report.objects.exists()


@pytest.mark.django_db
def test_status_filter_and_update(reporter):
    first = services.create_report(reporter.id, "One", "d")
    services.create_report(reporter.id, "Two", "d")

    services.update_report_status(first.id, Report.Status.RESOLVED)

    assert list(services.list_reports(Report.Status.RESOLVED)) == [first]
    assert services.list_reports(Report.Status.OPEN).count() == 1
    assert services.list_reports().count() == 2


@pytest.mark.django_db
def test_delete(reporter):
    report = services.create_report(reporter.id, "One", "d")

    services.delete_report(report.id)

    with pytest.raises(ReportNotFound):
        services.delete_report(report.id)


@pytest.mark.django_db
def test_report_api_round(reporter):
    client = APIClient()

    created = client.post(
        reverse("report-list"),
        {"reporter_id": str(reporter.id), "title": "Scam?", "description": "Owner asked for cash"},
        format="json",
    )
    assert created.status_code == status.HTTP_201_CREATED, created.data

    detail_url = reverse("report-detail", args=[created.data["id"]])
    patched = client.patch(detail_url, {"status": "IN_REVIEW"}, format="json")
    assert patched.data["status"] == "IN_REVIEW"

    assert client.delete(detail_url).status_code == status.HTTP_204_NO_CONTENT
    missing = client.get(detail_url)
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.data["code"] == "ReportNotFound"
