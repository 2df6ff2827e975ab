"""
Payment gateway integration

Narrow interface to the card processor: hosted checkout sessions, webhook
signature verification and transfers to owners. ``StripeGateway`` talks to
the Stripe REST API with ``requests``; when the gateway is disabled (or no
secret key is configured) sessions and transfers are emulated locally.
Signatures are always verified for real.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
import uuid
from dataclasses import dataclass

import requests
from django.conf import settings  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

from shared.domain.exceptions import PaymentProcessingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    checkout_url: str

    def to_dict(self) -> dict:
        return {"session_id": self.session_id, "checkout_url": self.checkout_url}


class PaymentGateway:
    """Contract every gateway implementation honours."""

    def create_session(
        self,
        amount_in_cents: int,
        description: str,
        success_url: str,
        cancel_url: str,
        metadata: dict,
    ) -> CheckoutSession:
        raise NotImplementedError

    def verify_webhook_signature(self, payload: bytes | str, signature: str) -> bool:
        raise NotImplementedError

    def create_transfer(self, amount_in_cents: int, reference: str) -> str:
        """Send money to a connected owner account; returns the transfer id."""
        raise NotImplementedError


def compute_signature(secret: str, timestamp: int | str, payload: bytes | str) -> str:
    """
    HMAC-SHA256 over ``"<timestamp>.<payload>"``, hex encoded.

    This is the ``v1`` scheme of the ``Stripe-Signature`` header.
    """
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    signed = f"{timestamp}.{payload}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def parse_signature_header(header: str) -> tuple[int | None, list[str]]:
    """Split ``t=...,v1=...,v1=...`` into the timestamp and v1 signatures."""
    timestamp = None
    signatures: list[str] = []
    for item in (header or "").split(","):
        key, _, value = item.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                return None, []
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


class StripeGateway(PaymentGateway):
    """Stripe over its REST API (form-encoded requests, bearer auth)."""

    def __init__(self, secret_key=None, webhook_secret=None, base_url=None, timeout=None, enabled=None):
        self.secret_key = secret_key if secret_key is not None else settings.STRIPE_SECRET_KEY
        self.webhook_secret = webhook_secret if webhook_secret is not None else settings.STRIPE_WEBHOOK_SECRET
        self.base_url = base_url or settings.STRIPE_API_BASE_URL
        self.timeout = timeout or settings.PAYMENT_GATEWAY_TIMEOUT
        self.enabled = settings.PAYMENT_GATEWAY_ENABLED if enabled is None else enabled
        self.tolerance = settings.WEBHOOK_TOLERANCE_SECONDS

    @property
    def emulated(self) -> bool:
        return not self.enabled or not self.secret_key

    def _post(self, path: str, data: dict) -> dict:
        try:
            response = requests.post(
                f"{self.base_url}{path}",
                data=data,
                headers={"Authorization": f"Bearer {self.secret_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Stripe request to {path} failed: {e}", exc_info=True)
            raise PaymentProcessingError(f"Payment gateway error: {e}")
        except ValueError as e:
            logger.error(f"Stripe returned a non-JSON response for {path}: {e}")
            raise PaymentProcessingError("Payment gateway returned an invalid response")

    def create_session(self, amount_in_cents, description, success_url, cancel_url, metadata):
        logger.info(f"Creating checkout session for {amount_in_cents} cents ({metadata})")

        if self.emulated:
            logger.warning("Using emulated payment gateway (disabled or no secret key)")
            session_id = f"cs_test_{uuid.uuid4().hex[:24]}"
            return CheckoutSession(
                session_id=session_id,
                checkout_url=f"{success_url}?session_id={session_id}",
            )

        data = {
            "mode": "payment",
            "success_url": success_url,
            "cancel_url": cancel_url,
            "line_items[0][quantity]": 1,
            "line_items[0][price_data][currency]": settings.CURRENCY,
            "line_items[0][price_data][unit_amount]": amount_in_cents,
            "line_items[0][price_data][product_data][name]": description,
        }
        for key, value in metadata.items():
            data[f"metadata[{key}]"] = value

        result = self._post("checkout/sessions", data)
        session = CheckoutSession(session_id=result["id"], checkout_url=result["url"])
        logger.info(f"Checkout session {session.session_id} created")
        return session

    def verify_webhook_signature(self, payload, signature):
        if not self.webhook_secret:
            logger.error("Webhook secret is not configured; rejecting webhook")
            return False

        timestamp, signatures = parse_signature_header(signature)
        if timestamp is None or not signatures:
            return False
        if abs(time.time() - timestamp) > self.tolerance:
            logger.warning(f"Webhook timestamp {timestamp} outside tolerance window")
            return False

        expected = compute_signature(self.webhook_secret, timestamp, payload)
        return any(hmac.compare_digest(expected, candidate) for candidate in signatures)

    def create_transfer(self, amount_in_cents, reference):
        logger.info(f"Creating transfer of {amount_in_cents} cents ({reference})")

        if self.emulated:
            logger.warning("Using emulated payment gateway (disabled or no secret key)")
            return f"tr_test_{uuid.uuid4().hex[:24]}"

        result = self._post(
            "transfers",
            {
                "amount": amount_in_cents,
                "currency": settings.CURRENCY,
                "transfer_group": reference,
                "metadata[reference]": reference,
            },
        )
        return result["id"]


def get_payment_gateway() -> PaymentGateway:
    """Instantiate the gateway named by ``PAYMENT_GATEWAY_CLASS``."""
    return import_string(settings.PAYMENT_GATEWAY_CLASS)()
