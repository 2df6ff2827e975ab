"""Services for tool listings."""

from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction  # type: ignore

from apps.users.models import User
from shared.domain.exceptions import InvalidTransition, UserNotFound

from .models import Tool

logger = logging.getLogger(__name__)


@transaction.atomic
def create_tool(owner_id: UUID, **fields) -> Tool:
    """Publish a listing for ``owner_id``; inactive accounts cannot list."""
    try:
        owner = User.objects.get(pk=owner_id)
    except User.DoesNotExist:
        raise UserNotFound(f"User not found: {owner_id}")
    if not owner.is_active:
        raise InvalidTransition("Inactive users cannot list tools.")

    tool = Tool.objects.create(owner=owner, **fields)
    logger.info(f"Tool {tool.id} listed by {owner.id}")
    return tool
