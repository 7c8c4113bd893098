"""
Tests for admin stats, ledger oversight and site content.
"""
from datetime import datetime

import pytest

from gigzz.core.config import TOKEN_PRICE
from gigzz.core.errors import InsufficientTokensError, NotFoundError, ValidationFailedError
from gigzz.db.models.token_transaction import KIND_APPLICATION
from gigzz.services import admin_service, content_service, wallet_service


def test_stats_totals_and_revenue(db_session, make_employer, make_applicant):
    make_employer(email="admin@example.com", is_admin=True)
    make_employer(balance=20)
    creative = make_applicant(balance=10)
    wallet_service.debit(db_session, creative.id, 3, "Application", kind=KIND_APPLICATION)

    stats = admin_service.get_stats(db_session, today=datetime.utcnow())

    assert stats["total_users"] == 3
    assert stats["total_employers"] == 2
    assert stats["total_applicants"] == 1
    assert stats["tokens_sold"] == 30
    assert stats["revenue"] == 30 * TOKEN_PRICE
    assert stats["tokens_spent"] == 3
    assert len(stats["last_7_days"]) == 7
    today = stats["last_7_days"][-1]
    assert today["tokens"] == 30
    assert today["revenue"] == 30 * TOKEN_PRICE


def test_transactions_include_user_names(db_session, make_applicant):
    make_applicant(balance=10)

    rows, total = admin_service.list_transactions(db_session)

    assert total == 1
    assert rows[0]["user_name"] == "Ada Obi"
    assert rows[0]["transaction"].tokens_in == 10


def test_adjust_wallet(db_session, make_employer):
    admin = make_employer(email="admin@example.com", is_admin=True)
    client = make_employer(balance=5)

    result = admin_service.adjust_wallet(db_session, admin, client.id, -2, "duplicate funding")
    assert result["balance"] == 3
    assert result["transaction"].description == "Adjustment: duplicate funding"

    with pytest.raises(InsufficientTokensError):
        admin_service.adjust_wallet(db_session, admin, client.id, -10, "too much")
    with pytest.raises(NotFoundError):
        admin_service.adjust_wallet(db_session, admin, 9999, 5, "ghost")


def test_content(db_session, make_employer):
    admin = make_employer(email="admin@example.com", is_admin=True)

    content_service.create_news(db_session, admin, "Gigzz launches", "We are live.")
    content_service.create_learn_more(db_session, admin, "Pricing your work", "Start with...", "Guides")
    content_service.create_learn_more(db_session, admin, "Staying safe", "Never pay...", "Safety")

    assert [news.title for news in content_service.list_news(db_session)] == ["Gigzz launches"]
    guides = content_service.list_learn_more(db_session, "Guides")
    assert [article.title for article in guides] == ["Pricing your work"]
    assert len(content_service.list_learn_more(db_session)) == 2
    with pytest.raises(ValidationFailedError):
        content_service.create_news(db_session, admin, "", "body")
