"""URL routing for tool listings."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ToolViewSet

router = DefaultRouter()
router.register(r"", ToolViewSet, basename="tool")

urlpatterns = [
    path("", include(router.urls)),
]
