"""
Tests for the token wallet and ledger.
"""
from datetime import datetime, timedelta

import pytest

from gigzz.core.errors import InsufficientTokensError, ValidationFailedError
from gigzz.db.models.token_transaction import (
    TokenTransaction,
    KIND_APPLICATION,
    KIND_FUNDING,
    KIND_PROMOTION,
)
from gigzz.db.models.token_wallet import TokenWallet
from gigzz.services import wallet_service


def test_missing_wallet_has_zero_balance(db_session):
    assert wallet_service.get_balance(db_session, 999) == 0


def test_credit_updates_balance_and_ledger(db_session, employer):
    entry = wallet_service.credit(db_session, employer.id, 25, "Wallet funding", reference="cs_1")

    assert entry.tokens_in == 25
    assert entry.tokens_out == 0
    assert entry.kind == KIND_FUNDING
    assert wallet_service.get_balance(db_session, employer.id) == 25
    assert wallet_service.ledger_balance(db_session, employer.id) == 25


def test_debit_updates_balance_and_ledger(db_session, make_employer):
    user = make_employer(balance=15)

    entry = wallet_service.debit(db_session, user.id, 5, "Job promotion", kind=KIND_PROMOTION)

    assert entry.tokens_out == 5
    assert entry.signed_amount == -5
    assert wallet_service.get_balance(db_session, user.id) == 10
    wallet = wallet_service.get_wallet(db_session, user.id)
    assert wallet.last_action == "Job promotion"


def test_debit_insufficient_writes_nothing(db_session, make_employer):
    user = make_employer(balance=2)

    with pytest.raises(InsufficientTokensError) as exc:
        wallet_service.debit(db_session, user.id, 3, "Application", kind=KIND_APPLICATION)

    assert exc.value.details == {"balance": 2, "required": 3}
    db_session.rollback()
    assert wallet_service.get_balance(db_session, user.id) == 2
    assert db_session.query(TokenTransaction).filter_by(user_id=user.id).count() == 1


@pytest.mark.parametrize("amount", [0, -4])
def test_non_positive_amounts_rejected(db_session, employer, amount):
    with pytest.raises(ValidationFailedError):
        wallet_service.credit(db_session, employer.id, amount, "bad")
    with pytest.raises(ValidationFailedError):
        wallet_service.debit(db_session, employer.id, amount, "bad", kind=KIND_PROMOTION)


def test_adjust_is_signed(db_session, make_employer):
    user = make_employer(balance=10)

    wallet_service.adjust(db_session, user.id, 4, "goodwill")
    wallet_service.adjust(db_session, user.id, -6, "refund reversal")

    assert wallet_service.get_balance(db_session, user.id) == 8
    assert wallet_service.ledger_balance(db_session, user.id) == 8


def test_list_transactions_filters_direction(db_session, make_employer):
    user = make_employer(balance=20)
    wallet_service.debit(db_session, user.id, 5, "Promotion", kind=KIND_PROMOTION)
    wallet_service.debit(db_session, user.id, 3, "Application", kind=KIND_APPLICATION)

    incoming, total_in = wallet_service.list_transactions(db_session, user.id, "in")
    outgoing, total_out = wallet_service.list_transactions(db_session, user.id, "out")
    everything, total = wallet_service.list_transactions(db_session, user.id, "all")

    assert total_in == 1 and incoming[0].tokens_in == 20
    assert total_out == 2 and all(row.tokens_out > 0 for row in outgoing)
    assert total == 3
    assert everything[0].description == "Application"


def test_list_transactions_paginates(db_session, make_employer):
    user = make_employer(balance=10)
    for _ in range(4):
        wallet_service.debit(db_session, user.id, 1, "Spend", kind=KIND_PROMOTION)

    rows, total = wallet_service.list_transactions(db_session, user.id, page=2, page_size=2)

    assert total == 5
    assert len(rows) == 2


def test_reconcile_reports_and_repairs_drift(db_session, make_employer):
    user = make_employer(balance=10)
    wallet = db_session.query(TokenWallet).filter_by(user_id=user.id).one()
    wallet.balance = 14
    db_session.commit()

    report = wallet_service.reconcile(db_session, user.id)
    assert report == {
        "user_id": user.id,
        "wallet_balance": 14,
        "ledger_balance": 10,
        "drift": 4,
        "repaired": False,
    }

    repaired = wallet_service.reconcile(db_session, user.id, repair=True)
    assert repaired["repaired"] is True
    assert wallet_service.get_balance(db_session, user.id) == 10
    assert wallet_service.reconcile(db_session, user.id)["drift"] == 0


def test_daily_funding_buckets_last_seven_days(db_session, employer):
    today = datetime(2026, 3, 10, 12, 0)
    for days_ago, tokens in ((0, 4), (0, 6), (3, 10), (9, 99)):
        db_session.add(TokenTransaction(
            user_id=employer.id,
            description="Funding",
            tokens_in=tokens,
            tokens_out=0,
            kind=KIND_FUNDING,
            created_at=today - timedelta(days=days_ago),
        ))
    db_session.commit()

    series = wallet_service.daily_funding(db_session, days=7, today=today)

    assert len(series) == 7
    assert series[0]["date"] == "2026-03-04"
    assert series[-1] == {"date": "2026-03-10", "tokens": 10, "transactions": 2}
    assert series[3] == {"date": "2026-03-07", "tokens": 10, "transactions": 1}
    assert sum(day["tokens"] for day in series) == 20
