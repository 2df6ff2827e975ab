"""API views for reviews and reputation scores."""

from __future__ import annotations

from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.services import get_user

from . import services
from .models import Review
from .reputation import recalculate_all_reputations, refresh_user_reputation
from .serializers import ReviewCreateSerializer, ReviewSerializer, ReviewUpdateSerializer


class ReviewViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """List, create and edit reviews. Filter by booking, tool, user or type."""

    queryset = Review.objects.all()
    serializer_class = ReviewSerializer
    filterset_fields = ['booking', 'reviewer', 'target_tool', 'target_user', 'review_type']

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        review = services.create_review(
            data['booking_id'],
            data['reviewer_id'],
            data['rating'],
            data.get('comment', ''),
            data.get('review_type'),
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None, *args, **kwargs):  # type: ignore
        serializer = ReviewUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        review = services.update_review(pk, data['reviewer_id'], data['rating'], data.get('comment'))
        return Response(ReviewSerializer(review).data)

    @action(detail=False, methods=['post'], url_path='reputations/recalculate')
    def recalculate_reputations(self, request):  # type: ignore
        changed = recalculate_all_reputations()
        return Response({'changed': changed})

    @action(detail=False, methods=['post'], url_path=r'reputations/(?P<user_id>[0-9a-f-]+)/refresh')
    def refresh_reputation(self, request, user_id=None):  # type: ignore
        user = get_user(user_id)
        return Response({'user_id': str(user.id), 'reputation_score': refresh_user_reputation(user.id)})
