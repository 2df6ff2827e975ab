"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import services
from .models import Booking
from .serializers import (
    BookingActorSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    ConditionReportSerializer,
    OwnerDecisionSerializer,
)


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Rental requests and their lifecycle.

    Every state change goes through ``apps.bookings.services``; the viewset
    only parses input and renders the booking back.
    """

    queryset = Booking.objects.select_related("tool").all()
    serializer_class = BookingSerializer
    filterset_fields = ["renter", "owner", "tool", "status", "payment_status"]

    def _render(self, booking: Booking, status_code=status.HTTP_200_OK) -> Response:
        return Response(BookingSerializer(booking).data, status=status_code)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.create_booking(**serializer.validated_data)
        return self._render(booking, status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):  # type: ignore
        serializer = OwnerDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._render(services.approve_booking(pk, serializer.validated_data.get("actor_id")))

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        serializer = OwnerDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._render(services.reject_booking(pk, serializer.validated_data.get("actor_id")))

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):  # type: ignore
        return self._render(services.activate_booking(pk))

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = BookingActorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._render(services.cancel_booking(pk, serializer.validated_data["actor_id"]))

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):  # type: ignore
        return self._render(services.complete_booking(pk))

    @action(detail=True, methods=["post"], url_path="condition-report")
    def condition_report(self, request, pk=None):  # type: ignore
        serializer = ConditionReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = services.report_condition(
            pk,
            data["actor_id"],
            data["condition"],
            data.get("description", ""),
        )
        return self._render(booking)
