"""
Admin endpoints: platform stats, ledger oversight and site content.

All routes require an account with is_admin set.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db, require_admin
from gigzz.core.errors import GigzzError, to_http_exception
from gigzz.db.models.user import User
from gigzz.schemas.admin import (
    AdjustRequest,
    AdminTransaction,
    LearnMoreCreate,
    LearnMoreResponse,
    NewsResponse,
    ReconcileResponse,
    StatsResponse,
)
from gigzz.schemas.wallet import TransactionResponse
from gigzz.services import admin_service, content_service, storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/stats", response_model=StatsResponse)
def stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Totals, token sales and revenue, plus a funding series for the last 7 days."""
    return StatsResponse(**admin_service.get_stats(db))


@router.get("/transactions", response_model=List[AdminTransaction])
def transactions(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    rows, _ = admin_service.list_transactions(db, page, page_size)
    return [
        AdminTransaction(
            id=row["transaction"].id,
            user_id=row["user_id"],
            user_name=row["user_name"],
            email=row["email"],
            description=row["transaction"].description,
            tokens_in=row["transaction"].tokens_in,
            tokens_out=row["transaction"].tokens_out,
            kind=row["transaction"].kind,
            created_at=row["transaction"].created_at,
        )
        for row in rows
    ]


@router.post("/wallets/{user_id}/adjust")
def adjust_wallet(
    user_id: int,
    payload: AdjustRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        result = admin_service.adjust_wallet(db, admin, user_id, payload.tokens, payload.reason)
    except GigzzError as e:
        db.rollback()
        raise to_http_exception(e)
    return {
        "transaction": TransactionResponse.model_validate(result["transaction"]),
        "balance": result["balance"],
    }


@router.get("/wallets/{user_id}/reconcile", response_model=ReconcileResponse)
def reconcile_wallet(
    user_id: int,
    repair: bool = Query(False, description="Overwrite the cached balance with the ledger balance"),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        return ReconcileResponse(**admin_service.reconcile_wallet(db, user_id, repair=repair))
    except GigzzError as e:
        raise to_http_exception(e)


@router.post("/news", status_code=status.HTTP_201_CREATED, response_model=NewsResponse)
def create_news(
    title: str = Form(...),
    body: str = Form(...),
    image: Optional[UploadFile] = File(None),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        image_url = storage_service.save_upload(image, "news", admin.id) if image and image.filename else None
        news = content_service.create_news(db, admin, title, body, image_url)
    except GigzzError as e:
        raise to_http_exception(e)
    return NewsResponse.model_validate(news)


@router.post("/learn-more", status_code=status.HTTP_201_CREATED, response_model=LearnMoreResponse)
def create_learn_more(
    payload: LearnMoreCreate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        article = content_service.create_learn_more(db, admin, payload.title, payload.body, payload.category)
    except GigzzError as e:
        raise to_http_exception(e)
    return LearnMoreResponse.model_validate(article)
