"""
Token wallet service.

Every change to a wallet balance goes through credit() or debit(), which lock
the wallet row, append a ledger row and update the cached balance in the same
transaction. Callers that need to combine a debit with other writes (promotions,
applications) pass commit=False and commit once themselves.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from gigzz.core.errors import InsufficientTokensError, ValidationFailedError
from gigzz.db.models.token_wallet import TokenWallet
from gigzz.db.models.token_transaction import (
    TokenTransaction,
    KIND_ADJUSTMENT,
    KIND_FUNDING,
)

logger = logging.getLogger(__name__)


def get_wallet(db: Session, user_id: int, lock: bool = False) -> Optional[TokenWallet]:
    """Fetch a user's wallet, optionally with a row lock (SELECT ... FOR UPDATE)."""
    query = db.query(TokenWallet).filter(TokenWallet.user_id == user_id)
    if lock:
        query = query.with_for_update()
    return query.first()


def get_or_create_wallet(db: Session, user_id: int, lock: bool = False) -> TokenWallet:
    """Fetch a user's wallet, creating an empty one if none exists. Does not commit."""
    wallet = get_wallet(db, user_id, lock=lock)
    if wallet is None:
        wallet = TokenWallet(user_id=user_id, balance=0)
        db.add(wallet)
        db.flush()
        logger.info(f"Wallet created: user_id={user_id}")
    return wallet


def get_balance(db: Session, user_id: int) -> int:
    """Current balance; a user without a wallet row has 0 tokens."""
    wallet = get_wallet(db, user_id)
    return wallet.balance if wallet else 0


def credit(
    db: Session,
    user_id: int,
    tokens: int,
    description: str,
    kind: str = KIND_FUNDING,
    reference: Optional[str] = None,
    commit: bool = True,
) -> TokenTransaction:
    """
    Add tokens to a wallet and record the movement in the ledger.

    Args:
        db: Database session
        user_id: Wallet owner
        tokens: Positive number of tokens to add
        description: Human-readable ledger description
        kind: Ledger kind (funding, adjustment)
        reference: Optional unique external reference (payment session id)
        commit: Commit the transaction (False when part of a larger unit of work)

    Returns:
        The ledger row
    """
    if tokens <= 0:
        raise ValidationFailedError("Credit amount must be positive", {"tokens": tokens})

    wallet = get_or_create_wallet(db, user_id, lock=True)
    wallet.balance += tokens
    wallet.last_action = description

    entry = TokenTransaction(
        user_id=user_id,
        description=description,
        tokens_in=tokens,
        tokens_out=0,
        kind=kind,
        reference=reference,
    )
    db.add(entry)
    db.flush()

    if commit:
        db.commit()
        db.refresh(entry)

    logger.info(
        f"Tokens credited: user_id={user_id}, tokens={tokens}, kind={kind}, "
        f"balance={wallet.balance}, reference={reference}"
    )
    return entry


def debit(
    db: Session,
    user_id: int,
    tokens: int,
    description: str,
    kind: str,
    commit: bool = True,
) -> TokenTransaction:
    """
    Remove tokens from a wallet and record the movement in the ledger.

    Raises:
        InsufficientTokensError: balance is lower than `tokens`; nothing is written
    """
    if tokens <= 0:
        raise ValidationFailedError("Debit amount must be positive", {"tokens": tokens})

    wallet = get_wallet(db, user_id, lock=True)
    balance = wallet.balance if wallet else 0
    if balance < tokens:
        logger.warning(f"Insufficient tokens: user_id={user_id}, balance={balance}, required={tokens}")
        raise InsufficientTokensError(
            "Insufficient token balance. Kindly fund your wallet and try again.",
            {"balance": balance, "required": tokens},
        )

    wallet.balance -= tokens
    wallet.last_action = description

    entry = TokenTransaction(
        user_id=user_id,
        description=description,
        tokens_in=0,
        tokens_out=tokens,
        kind=kind,
    )
    db.add(entry)
    db.flush()

    if commit:
        db.commit()
        db.refresh(entry)

    logger.info(f"Tokens debited: user_id={user_id}, tokens={tokens}, kind={kind}, balance={wallet.balance}")
    return entry


def adjust(db: Session, user_id: int, tokens: int, reason: str) -> TokenTransaction:
    """Signed manual adjustment (admin). Negative values debit."""
    if tokens == 0:
        raise ValidationFailedError("Adjustment must be non-zero")
    description = f"Adjustment: {reason}"
    if tokens > 0:
        return credit(db, user_id, tokens, description, kind=KIND_ADJUSTMENT)
    return debit(db, user_id, -tokens, description, kind=KIND_ADJUSTMENT)


def find_by_reference(db: Session, reference: str) -> Optional[TokenTransaction]:
    return db.query(TokenTransaction).filter(TokenTransaction.reference == reference).first()


def list_transactions(
    db: Session,
    user_id: int,
    direction: str = "all",
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[TokenTransaction], int]:
    """
    Ledger rows for a user, newest first.

    Args:
        direction: "in" (credits), "out" (debits) or "all"

    Returns:
        (rows for the page, total matching rows)
    """
    query = db.query(TokenTransaction).filter(TokenTransaction.user_id == user_id)
    if direction == "in":
        query = query.filter(TokenTransaction.tokens_in > 0)
    elif direction == "out":
        query = query.filter(TokenTransaction.tokens_out > 0)

    total = query.count()
    rows = (
        query.order_by(TokenTransaction.created_at.desc(), TokenTransaction.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return rows, total


def ledger_balance(db: Session, user_id: int) -> int:
    """Balance derived from the ledger alone."""
    tokens_in, tokens_out = db.query(
        func.coalesce(func.sum(TokenTransaction.tokens_in), 0),
        func.coalesce(func.sum(TokenTransaction.tokens_out), 0),
    ).filter(TokenTransaction.user_id == user_id).one()
    return int(tokens_in) - int(tokens_out)


def reconcile(db: Session, user_id: int, repair: bool = False) -> Dict:
    """
    Compare the cached wallet balance with the ledger.

    Args:
        repair: overwrite the cached balance with the ledger balance when they differ

    Returns:
        {"user_id", "wallet_balance", "ledger_balance", "drift", "repaired"}
    """
    wallet = get_wallet(db, user_id, lock=repair)
    cached = wallet.balance if wallet else 0
    derived = ledger_balance(db, user_id)
    drift = cached - derived
    repaired = False

    if drift != 0:
        logger.warning(f"Wallet drift detected: user_id={user_id}, wallet={cached}, ledger={derived}")
        if repair:
            wallet = wallet or get_or_create_wallet(db, user_id)
            wallet.balance = derived
            wallet.last_action = "Reconciled with ledger"
            db.commit()
            repaired = True
            logger.info(f"Wallet repaired: user_id={user_id}, balance={derived}")

    return {
        "user_id": user_id,
        "wallet_balance": cached,
        "ledger_balance": derived,
        "drift": drift,
        "repaired": repaired,
    }


def daily_funding(db: Session, days: int = 7, today: Optional[datetime] = None) -> List[Dict]:
    """
    Funding totals per day for the last `days` days, oldest first.

    Returns:
        [{"date": "YYYY-MM-DD", "tokens": int, "transactions": int}, ...]
    """
    today = (today or datetime.utcnow()).date()
    start = today - timedelta(days=days - 1)

    rows = db.query(TokenTransaction).filter(
        TokenTransaction.kind == KIND_FUNDING,
        TokenTransaction.created_at >= datetime.combine(start, datetime.min.time()),
    ).all()

    buckets = {start + timedelta(days=i): {"tokens": 0, "transactions": 0} for i in range(days)}
    for row in rows:
        day = row.created_at.date()
        if day in buckets:
            buckets[day]["tokens"] += row.tokens_in or 0
            buckets[day]["transactions"] += 1

    return [
        {"date": day.isoformat(), **totals}
        for day, totals in sorted(buckets.items())
    ]
