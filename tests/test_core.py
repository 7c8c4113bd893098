"""
Tests for error mapping, pricing helpers, rate limiting and log sanitizing.
"""
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from gigzz.core.errors import AlreadyPromotedError, InsufficientTokensError, to_http_exception
from gigzz.core.logging_config import sanitize_log_data
from gigzz.core.rate_limit import check_rate_limit, rate_limit_store
from gigzz.core.token_pricing import normalize_job_plan, promotion_rank


def test_domain_errors_map_to_structured_http_errors():
    error = to_http_exception(InsufficientTokensError("Not enough", {"balance": 2, "required": 5}))

    assert error.status_code == 402
    assert error.detail == {"error": "insufficient_tokens", "message": "Not enough", "balance": 2, "required": 5}
    assert to_http_exception(AlreadyPromotedError("busy")).status_code == 409


@pytest.mark.parametrize("plan,expected", [
    ("gold", "Gold"),
    (" PREMIUM ", "Premium"),
    ("Silver", "Silver"),
    ("bronze", None),
    ("", None),
    (None, None),
])
def test_normalize_job_plan(plan, expected):
    assert normalize_job_plan(plan) == expected


def test_promotion_rank_order():
    assert promotion_rank("Premium") < promotion_rank("Gold") < promotion_rank("Silver") < promotion_rank(None)


def test_rate_limit_per_bucket():
    rate_limit_store.clear()
    request = SimpleNamespace(headers={"X-Forwarded-For": "10.0.0.1, 172.16.0.1"}, client=None)

    for _ in range(3):
        check_rate_limit(request, max_requests=3, window_seconds=60, bucket="email")
    with pytest.raises(HTTPException) as exc:
        check_rate_limit(request, max_requests=3, window_seconds=60, bucket="email")
    assert exc.value.status_code == 429

    check_rate_limit(request, max_requests=3, window_seconds=60, bucket="other")
    assert "email:10.0.0.1" in rate_limit_store


def test_sanitize_log_data_redacts_secrets():
    data = {"email": "ada@example.com", "password": "hunter22", "stripe_secret_key": "sk_live", "tokens": 5}

    sanitized = sanitize_log_data(data)

    assert sanitized["email"] == "ada@example.com"
    assert sanitized["password"] == "***REDACTED***"
    assert sanitized["stripe_secret_key"] == "***REDACTED***"
    assert data["password"] == "hunter22"
