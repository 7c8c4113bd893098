"""
Tests for the auth endpoints.
"""
import pytest

from gigzz.core.errors import EmailDeliveryError
from gigzz.db.models.email_verification import EmailVerification
from gigzz.services import email_service


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    sent = []
    monkeypatch.setattr(email_service, "send_email", lambda to, subject, html, timeout=15.0: sent.append(to) or "id")
    return sent


SIGNUP = {
    "email": "ada@example.com",
    "password": "SecurePass123",
    "first_name": "Ada",
    "last_name": "Obi",
    "role": "creative",
    "country": "Nigeria",
    "state": "Lagos",
    "city": "Ikeja",
}


def test_signup_login_and_me(client, outbox):
    response = client.post("/auth/signup", json=SIGNUP)
    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "applicant"
    assert body["email_sent"] is True
    assert outbox == ["ada@example.com"]

    login = client.post("/auth/login", data={"username": "ada@example.com", "password": "SecurePass123"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["display_name"] == "Ada Obi"
    assert me.json()["token_balance"] == 0


def test_signup_duplicate_email_returns_409(client):
    client.post("/auth/signup", json=SIGNUP)
    response = client.post("/auth/signup", json=SIGNUP)

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "conflict"


def test_signup_short_password_returns_422(client):
    response = client.post("/auth/signup", json={**SIGNUP, "password": "short"})
    assert response.status_code == 422


def test_login_wrong_password(client):
    client.post("/auth/signup", json=SIGNUP)
    response = client.post("/auth/login", data={"username": "ada@example.com", "password": "wrongpass1"})
    assert response.status_code == 401


def test_verify_email_endpoint(client, db_session):
    client.post("/auth/signup", json=SIGNUP)
    token = db_session.query(EmailVerification).one().token

    assert client.post("/auth/verify-email", json={"token": token}).status_code == 200
    assert client.post("/auth/verify-email", json={"token": token}).status_code == 400


def test_password_reset_does_not_reveal_accounts(client):
    client.post("/auth/signup", json=SIGNUP)

    known = client.post("/auth/password-reset", json={"email": "ada@example.com"})
    unknown = client.post("/auth/password-reset", json={"email": "ghost@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()


@pytest.mark.parametrize("path", ["/auth/password-reset", "/auth/resend-verification"])
def test_email_failure_does_not_reveal_accounts(client, monkeypatch, path):
    client.post("/auth/signup", json=SIGNUP)

    def failing_send(to, subject, html, timeout=15.0):
        raise EmailDeliveryError("Email provider is not configured")

    monkeypatch.setattr(email_service, "send_email", failing_send)

    known = client.post(path, json={"email": "ada@example.com"})
    unknown = client.post(path, json={"email": "ghost@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()


def test_email_endpoints_are_rate_limited(client):
    statuses = [
        client.post("/auth/password-reset", json={"email": "ghost@example.com"}).status_code
        for _ in range(6)
    ]
    assert statuses[:5] == [200] * 5
    assert statuses[5] == 429


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
