"""
Tests for wallet endpoints and the Stripe webhook.
"""
from types import SimpleNamespace

import stripe

from gigzz.core.config import TOKEN_PRICE
from gigzz.services import billing_service, wallet_service


def test_wallet_balance_and_history(client, make_applicant, auth_headers):
    user = make_applicant(balance=12)

    wallet = client.get("/wallet", headers=auth_headers(user))
    assert wallet.status_code == 200
    assert wallet.json() == {"balance": 12, "last_action": "Test funding", "token_price": TOKEN_PRICE}

    history = client.get("/wallet/transactions?direction=in", headers=auth_headers(user))
    assert history.status_code == 200
    assert history.json()["total"] == 1
    assert history.json()["transactions"][0]["tokens_in"] == 12

    assert client.get("/wallet/transactions?direction=sideways", headers=auth_headers(user)).status_code == 422


def test_checkout_endpoint(client, employer, auth_headers, monkeypatch):
    monkeypatch.setattr(billing_service, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(
        stripe.checkout.Session,
        "create",
        lambda **kwargs: SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/cs_test_1"),
    )

    response = client.post("/wallet/checkout", json={"tokens": 40}, headers=auth_headers(employer))

    assert response.status_code == 200
    assert response.json()["session_id"] == "cs_test_1"


def test_checkout_rejects_zero_tokens(client, employer, auth_headers):
    response = client.post("/wallet/checkout", json={"tokens": 0}, headers=auth_headers(employer))
    assert response.status_code == 422


def test_webhook_credits_wallet_idempotently(client, employer, db_session, monkeypatch):
    event = {
        "id": "evt_1",
        "type": "checkout.session.completed",
        "data": {"object": {
            "id": "cs_test_1",
            "payment_status": "paid",
            "amount_total": 40 * billing_service.unit_amount(),
            "metadata": {"user_id": str(employer.id), "tokens": "40"},
        }},
    }
    monkeypatch.setattr(billing_service, "verify_webhook", lambda body, signature: event)

    first = client.post("/billing/webhook", content=b"{}", headers={"stripe-signature": "t=1,v1=abc"})
    second = client.post("/billing/webhook", content=b"{}", headers={"stripe-signature": "t=1,v1=abc"})

    assert first.json() == {"status": "success", "tokens_credited": 40}
    assert second.json() == {"status": "success", "tokens_credited": 0}
    assert wallet_service.get_balance(db_session, employer.id) == 40


def test_webhook_bad_signature(client, monkeypatch):
    monkeypatch.setattr(billing_service, "STRIPE_WEBHOOK_SECRET", "whsec_test")

    def reject(*args, **kwargs):
        raise stripe.SignatureVerificationError("bad signature", "sig")

    monkeypatch.setattr(stripe.Webhook, "construct_event", reject)

    response = client.post("/billing/webhook", content=b"{}", headers={"stripe-signature": "forged"})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "webhook_verification_failed"
