"""API views for reports."""

from __future__ import annotations

from rest_framework import status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import services
from .serializers import ReportSerializer, ReportStatusSerializer


class ReportViewSet(viewsets.ViewSet):
    """File, browse, triage and delete reports. ``?status=`` filters the list."""

    def list(self, request):  # type: ignore
        reports = services.list_reports(request.query_params.get("status"))
        return Response(ReportSerializer(reports, many=True).data)

    def retrieve(self, request, pk=None):  # type: ignore
        return Response(ReportSerializer(services.get_report(pk)).data)

    def create(self, request):  # type: ignore
        serializer = ReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = services.create_report(**serializer.validated_data)
        return Response(ReportSerializer(report).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):  # type: ignore
        serializer = ReportStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = services.update_report_status(pk, serializer.validated_data["status"])
        return Response(ReportSerializer(report).data)

    def destroy(self, request, pk=None):  # type: ignore
        services.delete_report(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
