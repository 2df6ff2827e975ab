"""Subscription services for marketplace users.

PRO membership is a one-time purchase: it stays active until the member
cancels it. Checkout for the purchase goes through the payment
orchestrator in ``apps.finances.services``; this module owns the state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.exceptions import (
    SubscriptionAlreadyActive,
    SubscriptionNotActive,
    UserNotFound,
)

from .models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscriptionStatus:
    tier: str
    active: bool
    started_at: datetime | None
    ended_at: datetime | None
    discount_percentage: Decimal


def get_user(user_id: UUID, *, lock: bool = False) -> User:
    qs = User.objects.select_for_update() if lock else User.objects.all()
    try:
        return qs.get(pk=user_id)
    except User.DoesNotExist:
        raise UserNotFound(f"User not found: {user_id}")


def discount_percentage(user: User) -> Decimal:
    """Percentage taken off rentals for ``user``."""
    return settings.PRO_DISCOUNT_PERCENTAGE if user.is_pro_member() else Decimal("0")


@transaction.atomic
def activate_pro_subscription(user_id: UUID, reference: str) -> User:
    user = get_user(user_id, lock=True)
    if user.is_pro_member():
        raise SubscriptionAlreadyActive()

    user.subscription_tier = User.SubscriptionTier.PRO
    user.subscription_started_at = timezone.now()
    user.subscription_ended_at = None
    user.subscription_reference = reference
    user.save(update_fields=[
        "subscription_tier",
        "subscription_started_at",
        "subscription_ended_at",
        "subscription_reference",
        "updated_at",
    ])
    logger.info(f"Pro subscription activated for user {user.id} (ref {reference})")
    return user


@transaction.atomic
def cancel_subscription(user_id: UUID) -> User:
    user = get_user(user_id, lock=True)
    if not user.is_pro_member():
        raise SubscriptionNotActive()

    user.subscription_tier = User.SubscriptionTier.FREE
    user.subscription_ended_at = timezone.now()
    user.subscription_reference = ""
    user.save(update_fields=[
        "subscription_tier",
        "subscription_ended_at",
        "subscription_reference",
        "updated_at",
    ])
    logger.info(f"Pro subscription cancelled for user {user.id}")
    return user


def get_subscription_status(user_id: UUID) -> SubscriptionStatus:
    user = get_user(user_id)
    return SubscriptionStatus(
        tier=user.subscription_tier,
        active=user.is_pro_member(),
        started_at=user.subscription_started_at,
        ended_at=user.subscription_ended_at,
        discount_percentage=discount_percentage(user),
    )
