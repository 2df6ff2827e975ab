"""Tool listing models for Toolshed."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Tool(models.Model):
    """A tool offered for rent by its owner."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        related_name="tools",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, max_length=1000)
    price_per_day = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    district = models.CharField(max_length=120, blank=True)
    location = models.CharField(max_length=255, blank=True)
    active = models.BooleanField(default=True)
    overall_rating = models.FloatField(default=0.0)
    num_ratings = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Tool")
        verbose_name_plural = _("Tools")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price_per_day__gt=0),
                name="tool_price_per_day_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["owner"]),
            models.Index(fields=["district", "active"]),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.price_per_day}/day)"

    def deactivate(self) -> None:
        self.active = False
        self.save(update_fields=["active", "updated_at"])
