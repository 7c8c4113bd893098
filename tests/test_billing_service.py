"""
Tests for Stripe token purchases and the funding webhook.
"""
from types import SimpleNamespace

import pytest
import stripe

from gigzz.core.errors import PaymentError, ValidationFailedError
from gigzz.db.models.token_transaction import TokenTransaction
from gigzz.services import billing_service, wallet_service


def completed_event(user_id, tokens=20, amount_total=None, session_id="cs_test_123", status="paid"):
    return {
        "id": "evt_1",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": session_id,
                "payment_status": status,
                "amount_total": amount_total if amount_total is not None else tokens * billing_service.unit_amount(),
                "customer_email": "client@example.com",
                "metadata": {"user_id": str(user_id), "tokens": str(tokens)},
            }
        },
    }


def test_checkout_session_prices_tokens(monkeypatch, employer):
    captured = {}

    def fake_create(**kwargs):
        captured.update(kwargs)
        return SimpleNamespace(id="cs_test_abc", url="https://checkout.stripe.com/pay/cs_test_abc")

    monkeypatch.setattr(billing_service, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(stripe.checkout.Session, "create", fake_create)

    result = billing_service.create_token_checkout_session(employer, 12)

    assert result == {"checkout_url": "https://checkout.stripe.com/pay/cs_test_abc", "session_id": "cs_test_abc"}
    assert captured["mode"] == "payment"
    assert captured["line_items"][0]["quantity"] == 12
    assert captured["line_items"][0]["price_data"]["unit_amount"] == billing_service.unit_amount()
    assert captured["metadata"] == {"user_id": str(employer.id), "tokens": "12"}
    assert captured["customer_email"] == employer.email


@pytest.mark.parametrize("tokens", [0, 10_001])
def test_checkout_rejects_out_of_range(monkeypatch, employer, tokens):
    monkeypatch.setattr(billing_service, "STRIPE_SECRET_KEY", "sk_test_123")
    with pytest.raises(ValidationFailedError):
        billing_service.create_token_checkout_session(employer, tokens)


def test_checkout_requires_stripe_key(monkeypatch, employer):
    monkeypatch.setattr(billing_service, "STRIPE_SECRET_KEY", None)
    with pytest.raises(PaymentError):
        billing_service.create_token_checkout_session(employer, 5)


def test_checkout_wraps_stripe_errors(monkeypatch, employer):
    def failing_create(**kwargs):
        raise stripe.StripeError("card network down")

    monkeypatch.setattr(billing_service, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(stripe.checkout.Session, "create", failing_create)

    with pytest.raises(PaymentError):
        billing_service.create_token_checkout_session(employer, 5)


def test_completed_session_credits_wallet_once(db_session, employer):
    event = completed_event(employer.id, tokens=20)

    assert billing_service.handle_event(event, db_session) == 20
    assert billing_service.handle_event(event, db_session) is None

    assert wallet_service.get_balance(db_session, employer.id) == 20
    rows = db_session.query(TokenTransaction).filter_by(reference="cs_test_123").all()
    assert len(rows) == 1


def test_unpaid_session_not_credited(db_session, employer):
    event = completed_event(employer.id, status="unpaid")

    assert billing_service.handle_event(event, db_session) is None
    assert wallet_service.get_balance(db_session, employer.id) == 0


def test_credit_capped_by_amount_paid(db_session, employer):
    event = completed_event(employer.id, tokens=20, amount_total=5 * billing_service.unit_amount())

    assert billing_service.handle_event(event, db_session) == 5


def test_unknown_user_raises(db_session):
    with pytest.raises(ValueError):
        billing_service.handle_event(completed_event(4242), db_session)


def test_other_events_ignored(db_session):
    assert billing_service.handle_event({"id": "evt_2", "type": "invoice.paid", "data": {}}, db_session) is None


def test_verify_webhook_requires_secret(monkeypatch):
    monkeypatch.setattr(billing_service, "STRIPE_WEBHOOK_SECRET", None)
    with pytest.raises(ValueError):
        billing_service.verify_webhook(b"{}", "sig")
