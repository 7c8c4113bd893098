"""
Admin dashboard figures and ledger oversight.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from gigzz.core.config import TOKEN_PRICE
from gigzz.core.errors import NotFoundError
from gigzz.db.models.application import Application
from gigzz.db.models.job import Job
from gigzz.db.models.token_transaction import TokenTransaction, KIND_FUNDING
from gigzz.db.models.user import User, ROLE_APPLICANT, ROLE_EMPLOYER
from gigzz.services import wallet_service

logger = logging.getLogger(__name__)


def _sum(db: Session, column, *criteria) -> int:
    value = db.query(func.coalesce(func.sum(column), 0)).filter(*criteria).scalar()
    return int(value or 0)


def get_stats(db: Session, today: Optional[datetime] = None) -> Dict:
    tokens_sold = _sum(db, TokenTransaction.tokens_in, TokenTransaction.kind == KIND_FUNDING)
    tokens_spent = _sum(db, TokenTransaction.tokens_out)

    series = [
        {**day, "revenue": day["tokens"] * TOKEN_PRICE}
        for day in wallet_service.daily_funding(db, days=7, today=today)
    ]

    return {
        "total_users": db.query(User).count(),
        "total_applicants": db.query(User).filter(User.role == ROLE_APPLICANT).count(),
        "total_employers": db.query(User).filter(User.role == ROLE_EMPLOYER).count(),
        "total_jobs": db.query(Job).count(),
        "total_applications": db.query(Application).count(),
        "tokens_sold": tokens_sold,
        "revenue": tokens_sold * TOKEN_PRICE,
        "tokens_spent": tokens_spent,
        "last_7_days": series,
    }


def list_transactions(db: Session, page: int = 1, page_size: int = 50) -> Tuple[List[Dict], int]:
    """Recent ledger rows across all users, newest first."""
    query = db.query(TokenTransaction, User).join(User, User.id == TokenTransaction.user_id)
    total = query.count()
    rows = (
        query.order_by(TokenTransaction.created_at.desc(), TokenTransaction.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return [
        {"transaction": transaction, "user_id": user.id, "user_name": user.display_name, "email": user.email}
        for transaction, user in rows
    ], total


def _require_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


def adjust_wallet(db: Session, admin: User, user_id: int, tokens: int, reason: str) -> Dict:
    _require_user(db, user_id)
    entry = wallet_service.adjust(db, user_id, tokens, reason)
    logger.info(f"Wallet adjusted by admin: admin_id={admin.id}, user_id={user_id}, tokens={tokens}")
    return {"transaction": entry, "balance": wallet_service.get_balance(db, user_id)}


def reconcile_wallet(db: Session, user_id: int, repair: bool = False) -> Dict:
    _require_user(db, user_id)
    return wallet_service.reconcile(db, user_id, repair=repair)
