"""Event handlers wired up by ``ReviewsConfig.ready()``."""

from __future__ import annotations

from shared.application.message_bus import message_bus

from .events import ReviewSubmitted
from .reputation import refresh_user_reputation


def update_reputation_on_review(event: ReviewSubmitted) -> None:
    refresh_user_reputation(event.target_user_id)


def register_handlers() -> None:
    message_bus.register_event_handler(ReviewSubmitted, update_reputation_on_review)
