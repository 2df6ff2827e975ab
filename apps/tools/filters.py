"""FilterSet definitions for tool search and listing."""

from __future__ import annotations

from decimal import Decimal

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Tool


class ToolFilterSet(django_filters.FilterSet):
    """Keyword, district and price range search over tool listings."""

    keyword = django_filters.CharFilter(method="filter_keyword")
    district = django_filters.CharFilter(field_name="district", lookup_expr="icontains")
    price_min = django_filters.NumberFilter(method="filter_price_min")
    price_max = django_filters.NumberFilter(method="filter_price_max")

    class Meta:
        model = Tool
        fields = [
            "keyword",
            "district",
            "owner",
            "active",
        ]

    def filter_keyword(self, queryset, name, value):  # type: ignore
        # withdrawn listings never show up in a keyword search
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(active=True).filter(
            Q(title__icontains=value) | Q(description__icontains=value)
        )

    def filter_price_min(self, queryset, name, value):  # type: ignore
        return queryset.filter(price_per_day__gte=max(value, Decimal("0")))

    def filter_price_max(self, queryset, name, value):  # type: ignore
        return queryset.filter(price_per_day__lte=max(value, Decimal("0")))
