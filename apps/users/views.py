"""User API views."""

from __future__ import annotations

from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import services
from .models import User
from .serializers import SubscriptionStatusSerializer, UserSerializer


class UserViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Marketplace users and their PRO subscription.

    - `subscription` (GET) returns the subscription status
    - `subscription` (DELETE) cancels an active PRO membership
    - buying PRO goes through `/api/v1/payments/pro-checkout/`
    """

    serializer_class = UserSerializer
    queryset = User.objects.all()
    filterset_fields = ["role", "status"]

    @action(detail=True, methods=["get", "delete"])
    def subscription(self, request, pk=None):  # type: ignore
        if request.method == "DELETE":
            services.cancel_subscription(pk)
        return Response(SubscriptionStatusSerializer(services.get_subscription_status(pk)).data)
