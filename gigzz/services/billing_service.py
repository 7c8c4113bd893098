"""
Billing service for Stripe integration.

Token purchases use Stripe Checkout in one-off payment mode. Wallets are only
credited from the signed checkout.session.completed webhook, never from the
browser redirect.
"""
import logging
from typing import Dict, Optional

import stripe
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gigzz.core.config import (
    FRONTEND_URL,
    STRIPE_CURRENCY,
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
    TOKEN_PRICE,
)
from gigzz.core.errors import PaymentError, ValidationFailedError
from gigzz.core.token_pricing import MAX_TOKEN_PURCHASE, MIN_TOKEN_PURCHASE
from gigzz.db.models.token_transaction import KIND_FUNDING
from gigzz.db.models.user import User
from gigzz.services import wallet_service

logger = logging.getLogger(__name__)

# Initialize Stripe client
if STRIPE_SECRET_KEY:
    stripe.api_key = STRIPE_SECRET_KEY
else:
    logger.warning("STRIPE_SECRET_KEY not configured - token purchases disabled")


def unit_amount() -> int:
    """Price of one token in the currency's minor unit (kobo for NGN)."""
    return TOKEN_PRICE * 100


def create_token_checkout_session(
    user: User,
    tokens: int,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> Dict[str, str]:
    """
    Create a Stripe Checkout session for buying tokens.

    Args:
        user: Buyer
        tokens: Number of tokens to buy
        success_url: Redirect after payment (defaults to FRONTEND_URL/wallet?funded=1)
        cancel_url: Redirect on cancel (defaults to FRONTEND_URL/wallet?cancelled=1)

    Returns:
        {"checkout_url": ..., "session_id": ...}
    """
    if tokens < MIN_TOKEN_PURCHASE or tokens > MAX_TOKEN_PURCHASE:
        raise ValidationFailedError(
            f"Token purchase must be between {MIN_TOKEN_PURCHASE} and {MAX_TOKEN_PURCHASE}",
            {"tokens": tokens},
        )
    if not STRIPE_SECRET_KEY:
        raise PaymentError("Stripe not configured - STRIPE_SECRET_KEY required")

    try:
        session = stripe.checkout.Session.create(
            mode="payment",
            customer_email=user.email,
            payment_method_types=["card"],
            line_items=[{
                "price_data": {
                    "currency": STRIPE_CURRENCY,
                    "unit_amount": unit_amount(),
                    "product_data": {"name": "Gigzz tokens"},
                },
                "quantity": tokens,
            }],
            success_url=success_url or f"{FRONTEND_URL}/wallet?funded=1",
            cancel_url=cancel_url or f"{FRONTEND_URL}/wallet?cancelled=1",
            metadata={
                "user_id": str(user.id),
                "tokens": str(tokens),
            },
        )
    except stripe.StripeError as e:
        logger.error(f"Stripe error creating checkout session: {e}")
        raise PaymentError("Failed to create checkout session") from e

    logger.info(f"Created token checkout session: session_id={session.id}, user_id={user.id}, tokens={tokens}")
    return {"checkout_url": session.url, "session_id": session.id}


def verify_webhook(request_body: bytes, signature: str) -> dict:
    """
    Verify and parse a Stripe webhook event.

    Raises:
        ValueError: If webhook verification fails
    """
    if not STRIPE_WEBHOOK_SECRET:
        raise ValueError("STRIPE_WEBHOOK_SECRET not configured")

    try:
        event = stripe.Webhook.construct_event(request_body, signature, STRIPE_WEBHOOK_SECRET)
    except ValueError as e:
        logger.error(f"Invalid webhook payload: {e}")
        raise ValueError(f"Invalid webhook payload: {e}")
    except stripe.SignatureVerificationError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        raise ValueError(f"Invalid signature: {e}")

    logger.info(f"Verified webhook event: {event['type']}, id={event['id']}")
    return event


def tokens_for_session(session_data: Dict) -> int:
    """
    Tokens paid for by a completed session: what the amount actually covers,
    capped by what was ordered.
    """
    metadata = session_data.get("metadata") or {}
    ordered = int(metadata.get("tokens") or 0)
    paid = int(session_data.get("amount_total") or 0) // unit_amount()
    return min(ordered, paid) if ordered else paid


def handle_checkout_session_completed(event_data: Dict, db: Session) -> Optional[int]:
    """
    Credit the buyer's wallet for a paid checkout session.

    Replays of the same session are ignored (the session id is the ledger
    reference).

    Returns:
        Tokens credited, or None when nothing was credited
    """
    session_data = event_data.get("object", {})
    session_id = session_data.get("id")
    metadata = session_data.get("metadata") or {}
    user_id_str = metadata.get("user_id")

    if session_data.get("payment_status") != "paid":
        logger.info(f"Checkout session not paid yet: session_id={session_id}")
        return None

    if user_id_str:
        user = db.query(User).filter(User.id == int(user_id_str)).first()
    elif session_data.get("customer_email"):
        user = db.query(User).filter(User.email == session_data["customer_email"]).first()
    else:
        raise ValueError("Cannot identify user from checkout session")

    if not user:
        raise ValueError("User not found for checkout session")

    if wallet_service.find_by_reference(db, session_id):
        logger.info(f"Checkout session already credited: session_id={session_id}")
        return None

    tokens = tokens_for_session(session_data)
    if tokens <= 0:
        logger.warning(f"Checkout session paid for zero tokens: session_id={session_id}")
        return None

    try:
        wallet_service.credit(
            db,
            user.id,
            tokens,
            "Wallet funding via Stripe",
            kind=KIND_FUNDING,
            reference=session_id,
        )
    except IntegrityError:
        # Another delivery of the same event won the race on the unique reference
        db.rollback()
        logger.info(f"Checkout session credited concurrently: session_id={session_id}")
        return None

    logger.info(f"Wallet funded: user_id={user.id}, tokens={tokens}, session_id={session_id}")
    return tokens


def handle_event(event: Dict, db: Session) -> Optional[int]:
    """Dispatch a verified Stripe event. Unhandled types are acknowledged and ignored."""
    if event["type"] in ("checkout.session.completed", "checkout.session.async_payment_succeeded"):
        return handle_checkout_session_completed(event["data"], db)

    logger.debug(f"Ignoring Stripe event type: {event['type']}")
    return None
