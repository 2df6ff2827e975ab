"""
REST framework glue for the shared kernel.

Domain errors carry their own status code; this handler turns them into
API responses so views can call services without try/except blocks.
"""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import DomainError, IntegrationError

logger = logging.getLogger(__name__)


def exception_handler(exc, context):
    """Render ``DomainError`` as ``{"detail", "code"}``; defer the rest to DRF."""
    if isinstance(exc, DomainError):
        view = context.get("view")
        view_name = view.__class__.__name__ if view is not None else "unknown"
        if isinstance(exc, IntegrationError):
            logger.error(f"{view_name}: {exc.code}: {exc.message}")
        else:
            logger.info(f"{view_name}: rejected with {exc.code}: {exc.message}")
        return Response({"detail": exc.message, "code": exc.code}, status=exc.status_code)
    return drf_exception_handler(exc, context)
