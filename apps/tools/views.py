"""API views for tool listings."""

from __future__ import annotations

from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .filters import ToolFilterSet
from .models import Tool
from .serializers import ToolSerializer
from .services import create_tool


class ToolViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Listings: create, browse, edit and withdraw (never delete)."""

    queryset = Tool.objects.select_related("owner").all()
    serializer_class = ToolSerializer
    filterset_class = ToolFilterSet

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        tool = create_tool(data.pop("owner_id"), **data)
        return Response(self.get_serializer(tool).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):  # type: ignore
        tool: Tool = self.get_object()  # type: ignore
        tool.deactivate()
        return Response(self.get_serializer(tool).data)
