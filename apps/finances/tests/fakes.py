"""In-memory payment gateway for tests."""

from __future__ import annotations

import json

from apps.finances.gateway import CheckoutSession, PaymentGateway
from shared.domain.exceptions import PaymentProcessingError


class FakeGateway(PaymentGateway):
    def __init__(self, *, signature_valid: bool = True, fail_with: str | None = None):
        self.signature_valid = signature_valid
        self.fail_with = fail_with
        self.sessions: list[dict] = []
        self.transfers: list[dict] = []

    def create_session(self, amount_in_cents, description, success_url, cancel_url, metadata):
        if self.fail_with:
            raise PaymentProcessingError(self.fail_with)
        n = len(self.sessions) + 1
        self.sessions.append(
            {"amount_in_cents": amount_in_cents, "description": description, "metadata": metadata}
        )
        return CheckoutSession(session_id=f"cs_fake_{n}", checkout_url=f"https://pay.example/{n}")

    def verify_webhook_signature(self, payload, signature):
        return self.signature_valid

    def create_transfer(self, amount_in_cents, reference):
        if self.fail_with:
            raise PaymentProcessingError(self.fail_with)
        self.transfers.append({"amount_in_cents": amount_in_cents, "reference": reference})
        return f"tr_fake_{len(self.transfers)}"


def checkout_completed(metadata: dict, event_id: str = "evt_1", session_id: str = "cs_fake_1", amount_total=3000) -> str:
    """Serialized ``checkout.session.completed`` event."""
    return json.dumps(
        {
            "id": event_id,
            "type": "checkout.session.completed",
            "data": {
                "object": {
                    "id": session_id,
                    "amount_total": amount_total,
                    "metadata": metadata,
                }
            },
        }
    )
