"""Payment orchestration, payouts and the owner wallet.

Gateway calls are never made while a booking or wallet row is locked:
checkout sessions are opened before anything is written, and payouts
reserve the amount in one transaction and settle it in another.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from django.conf import settings  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore

from apps.bookings import services as booking_services
from apps.users import services as user_services
from shared.domain.exceptions import (
    DepositNotRequired,
    InsufficientBalance,
    InvalidCheckoutAmount,
    InvalidPayoutAmount,
    InvalidSignature,
    InvalidTransition,
    InvalidWebhookPayload,
    PaymentAlreadyCompleted,
    PaymentProcessingError,
    SubscriptionAlreadyActive,
)
from shared.domain.value_objects import Money

from .gateway import PaymentGateway, get_payment_gateway
from .models import PaymentTransaction, Payout

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"

TYPE_RENTAL = "rental"
TYPE_DEPOSIT = "deposit"
TYPE_PRO_SUBSCRIPTION = "pro_subscription"


# --- Checkout sessions ---------------------------------------------------------

def create_checkout_session(
    booking_id: UUID,
    amount: Decimal | None = None,
    description: str = "",
    *,
    gateway: PaymentGateway | None = None,
) -> dict[str, str]:
    """
    Open a hosted checkout for the rental payment of a booking.

    An explicit ``amount`` must equal the booking total: the webhook only
    settles a rental whose charged amount matches it.
    """
    booking = booking_services.get_booking(booking_id)
    booking.ensure_payable()

    charge = Money(booking.total_price).rounded()
    if amount is not None and Money(amount).rounded() != charge:
        raise InvalidCheckoutAmount(f"Checkout amount {amount} does not match the booking total {charge}.")
    session = (gateway or get_payment_gateway()).create_session(
        charge.cents,
        description or f"Tool rental #{booking.id}",
        settings.PAYMENT_SUCCESS_URL,
        settings.PAYMENT_CANCEL_URL,
        {"booking_id": str(booking.id), "type": TYPE_RENTAL},
    )
    PaymentTransaction.objects.create(
        booking=booking,
        kind=PaymentTransaction.Kind.RENTAL,
        amount=charge.amount,
        session_id=session.session_id,
        event="session_created",
    )
    logger.info(f"Checkout session {session.session_id} opened for booking {booking.id} ({charge})")
    return session.to_dict()


def create_deposit_checkout_session(
    booking_id: UUID,
    *,
    gateway: PaymentGateway | None = None,
) -> dict[str, str]:
    """Open a hosted checkout for the damage deposit of a booking."""
    booking = booking_services.get_booking(booking_id)
    booking.ensure_deposit_due()

    charge = Money(booking.deposit_amount).rounded()
    session = (gateway or get_payment_gateway()).create_session(
        charge.cents,
        f"Damage deposit for booking #{booking.id}",
        settings.PAYMENT_SUCCESS_URL,
        settings.PAYMENT_CANCEL_URL,
        {"booking_id": str(booking.id), "type": TYPE_DEPOSIT},
    )
    PaymentTransaction.objects.create(
        booking=booking,
        kind=PaymentTransaction.Kind.DEPOSIT,
        amount=charge.amount,
        session_id=session.session_id,
        event="session_created",
    )
    logger.info(f"Deposit session {session.session_id} opened for booking {booking.id} ({charge})")
    return session.to_dict()


def create_pro_checkout_session(
    user_id: UUID,
    *,
    gateway: PaymentGateway | None = None,
) -> dict[str, Any]:
    """
    Open a checkout for the PRO membership.

    With the gateway disabled (local development) the membership is
    activated right away and no session is created.
    """
    user = user_services.get_user(user_id)
    if user.is_pro_member():
        raise SubscriptionAlreadyActive()

    if not settings.PAYMENT_GATEWAY_ENABLED:
        logger.warning(f"Payment gateway disabled; activating PRO for {user.id} directly")
        user_services.activate_pro_subscription(user.id, reference="gateway-disabled")
        return {"session_id": None, "checkout_url": None, "activated": True}

    price = Money(settings.PRO_PRICE).rounded()
    session = (gateway or get_payment_gateway()).create_session(
        price.cents,
        "Toolshed PRO membership",
        settings.SUBSCRIPTION_SUCCESS_URL,
        settings.SUBSCRIPTION_CANCEL_URL,
        {"user_id": str(user.id), "type": TYPE_PRO_SUBSCRIPTION},
    )
    PaymentTransaction.objects.create(
        user=user,
        kind=PaymentTransaction.Kind.SUBSCRIPTION,
        amount=price.amount,
        session_id=session.session_id,
        event="session_created",
    )
    logger.info(f"PRO checkout session {session.session_id} opened for user {user.id}")
    return {**session.to_dict(), "activated": False}


# --- Webhook ---------------------------------------------------------------------

def _parse_event(payload: bytes | str) -> dict:
    try:
        event = json.loads(payload)
    except (TypeError, ValueError):
        raise InvalidWebhookPayload()
    if not isinstance(event, dict):
        raise InvalidWebhookPayload("Webhook payload must be a JSON object.")
    return event


def _uuid_from(metadata: dict, key: str) -> UUID:
    try:
        return UUID(str(metadata[key]))
    except (KeyError, ValueError):
        raise InvalidWebhookPayload(f"Checkout metadata is missing a valid {key}.")


def _amount_total(session: dict) -> int:
    """Charged amount in cents; gateways send it as an integer."""
    raw = session.get("amount_total")
    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise InvalidWebhookPayload("Checkout amount_total must be an integer number of cents.")
    try:
        return int(str(raw))
    except ValueError:
        raise InvalidWebhookPayload("Checkout amount_total must be an integer number of cents.")


def _amount_matches(paid_cents: int, expected: Money, subject: str) -> bool:
    if paid_cents == expected.cents:
        return True
    logger.error(
        f"Checkout for {subject} charged {paid_cents} cents, expected {expected.cents}; "
        f"not settled, needs manual review"
    )
    return False


def _settle_checkout(session: dict, paid_cents: int) -> tuple[str, dict]:
    """Apply a completed checkout. Returns (outcome, transaction fields)."""
    metadata = session.get("metadata") or {}
    payment_type = metadata.get("type")

    if payment_type == TYPE_RENTAL:
        booking_id = _uuid_from(metadata, "booking_id")
        fields = {"booking_id": booking_id, "kind": PaymentTransaction.Kind.RENTAL}
        booking = booking_services.get_booking(booking_id)
        if not _amount_matches(paid_cents, Money(booking.total_price), f"booking {booking_id}"):
            return "amount_mismatch", fields
        try:
            booking_services.mark_paid(booking_id)
            outcome = "paid"
        except PaymentAlreadyCompleted:
            logger.warning(f"Booking {booking_id} was already paid; webhook ignored")
            outcome = "already_paid"
        except InvalidTransition:
            logger.error(
                f"Payment captured for booking {booking_id} in status {booking.status}; "
                f"not settled, refund the renter"
            )
            outcome = "unpayable"
        return outcome, fields

    if payment_type == TYPE_DEPOSIT:
        booking_id = _uuid_from(metadata, "booking_id")
        fields = {"booking_id": booking_id, "kind": PaymentTransaction.Kind.DEPOSIT}
        booking = booking_services.get_booking(booking_id)
        if not _amount_matches(paid_cents, Money(booking.deposit_amount), f"deposit of booking {booking_id}"):
            return "amount_mismatch", fields
        try:
            booking_services.mark_deposit_paid(booking_id)
            outcome = "deposit_paid"
        except DepositNotRequired:
            logger.warning(f"Deposit for booking {booking_id} not due; webhook ignored")
            outcome = "deposit_not_required"
        return outcome, fields

    if payment_type == TYPE_PRO_SUBSCRIPTION:
        user_id = _uuid_from(metadata, "user_id")
        fields = {"user_id": user_id, "kind": PaymentTransaction.Kind.SUBSCRIPTION}
        if not _amount_matches(paid_cents, Money(settings.PRO_PRICE), f"PRO membership of {user_id}"):
            return "amount_mismatch", fields
        try:
            user_services.activate_pro_subscription(user_id, reference=session.get("id", ""))
            outcome = "subscription_activated"
        except SubscriptionAlreadyActive:
            logger.warning(f"User {user_id} already PRO; webhook ignored")
            outcome = "already_active"
        return outcome, fields

    logger.info(f"Checkout with unknown payment type {payment_type!r} acknowledged")
    return "ignored", {}


def handle_webhook(
    payload: bytes | str,
    signature: str,
    *,
    gateway: PaymentGateway | None = None,
) -> dict[str, Any]:
    """
    Process a gateway event.

    Redelivered events (same event id) and late duplicates for an already
    settled booking are acknowledged without touching any state. A charge
    that does not match the amount due, or that arrives for a cancelled or
    rejected booking, is recorded as IGNORED and logged for manual refund.
    """
    gateway = gateway or get_payment_gateway()
    if not gateway.verify_webhook_signature(payload, signature):
        logger.warning("Rejected webhook with invalid signature")
        raise InvalidSignature()

    event = _parse_event(payload)
    event_id = event.get("id")
    event_type = event.get("type", "")

    if event_id and PaymentTransaction.objects.filter(event_id=event_id).exists():
        logger.info(f"Webhook event {event_id} already processed")
        return {"event_id": event_id, "event_type": event_type, "outcome": "duplicate"}

    if event_type != CHECKOUT_COMPLETED:
        logger.info(f"Webhook event {event_type} acknowledged and ignored")
        return {"event_id": event_id, "event_type": event_type, "outcome": "ignored"}

    session = (event.get("data") or {}).get("object") or {}
    if not isinstance(session, dict):
        raise InvalidWebhookPayload("Checkout session must be a JSON object.")
    paid_cents = _amount_total(session)
    try:
        with transaction.atomic():
            outcome, fields = _settle_checkout(session, paid_cents)
            if fields:
                PaymentTransaction.objects.create(
                    event_id=event_id or None,
                    event=event_type,
                    session_id=session.get("id", ""),
                    amount=Decimal(paid_cents) / 100,
                    status=(
                        PaymentTransaction.Status.SUCCEEDED
                        if outcome in ("paid", "deposit_paid", "subscription_activated")
                        else PaymentTransaction.Status.IGNORED
                    ),
                    payload=event,
                    **fields,
                )
    except IntegrityError:
        # a concurrent delivery of the same event won the insert
        logger.warning(f"Webhook event {event_id} processed concurrently; rolled back")
        return {"event_id": event_id, "event_type": event_type, "outcome": "duplicate"}

    logger.info(f"Webhook event {event_id} ({event_type}) -> {outcome}")
    return {"event_id": event_id, "event_type": event_type, "outcome": outcome}


# --- Payouts and wallet ----------------------------------------------------------

@dataclass(frozen=True)
class WalletSummary:
    owner_id: UUID
    balance: Decimal
    recent_payouts: list[Payout] = field(default_factory=list)


def _payout_amount(amount) -> Decimal:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidPayoutAmount()
    if not value.is_finite() or value <= 0:
        raise InvalidPayoutAmount()
    return Money(value).rounded().amount


def request_payout(
    owner_id: UUID,
    amount,
    *,
    gateway: PaymentGateway | None = None,
) -> Payout:
    """
    Move ``amount`` from the owner's wallet to their external account.

    The amount is reserved (wallet debited, payout PENDING) before the
    transfer is attempted; a failed transfer returns the reservation.
    """
    user_services.get_user(owner_id)
    value = _payout_amount(amount)

    with transaction.atomic():
        owner = user_services.get_user(owner_id, lock=True)
        if value > owner.wallet_balance:
            raise InsufficientBalance(
                f"Requested {value}, available {owner.wallet_balance}."
            )
        owner.debit_wallet(value)
        owner.save(update_fields=["wallet_balance", "updated_at"])
        payout = Payout.objects.create(owner=owner, amount=value)

    logger.info(f"Payout {payout.id} of {value} reserved for owner {owner_id}")

    try:
        transfer_id = (gateway or get_payment_gateway()).create_transfer(
            Money(value).cents, reference=f"payout_{payout.id}"
        )
    except PaymentProcessingError as e:
        with transaction.atomic():
            owner = user_services.get_user(owner_id, lock=True)
            owner.credit_wallet(value)
            owner.save(update_fields=["wallet_balance", "updated_at"])
            payout.mark_failed(e.message)
            payout.save(update_fields=["status", "failure_reason"])
        logger.error(f"Payout {payout.id} failed, {value} returned to wallet: {e}", exc_info=True)
        raise

    payout.mark_completed(transfer_id)
    payout.save(update_fields=["status", "external_transfer_id", "completed_at"])
    logger.info(f"Payout {payout.id} completed (transfer {transfer_id})")
    return payout


def get_payout_history(owner_id: UUID):
    user_services.get_user(owner_id)
    return Payout.objects.filter(owner_id=owner_id).order_by("-requested_at")


def get_wallet(owner_id: UUID) -> WalletSummary:
    owner = user_services.get_user(owner_id)
    recent = list(Payout.objects.filter(owner_id=owner_id).order_by("-requested_at")[:10])
    return WalletSummary(owner_id=owner.id, balance=owner.wallet_balance, recent_payouts=recent)
