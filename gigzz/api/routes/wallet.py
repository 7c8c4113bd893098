"""
Token wallet endpoints: balance, ledger history and token purchase.
"""
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db, get_current_user_obj
from gigzz.core.config import TOKEN_PRICE
from gigzz.core.errors import GigzzError, to_http_exception
from gigzz.db.models.user import User
from gigzz.schemas.wallet import (
    BalanceResponse,
    CreateCheckoutSessionRequest,
    CreateCheckoutSessionResponse,
    TransactionListResponse,
    TransactionResponse,
)
from gigzz.services import billing_service, wallet_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wallet", tags=["Wallet"])


@router.get("", response_model=BalanceResponse)
def get_wallet(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    wallet = wallet_service.get_wallet(db, user.id)
    return BalanceResponse(
        balance=wallet.balance if wallet else 0,
        last_action=wallet.last_action if wallet else None,
        token_price=TOKEN_PRICE,
    )


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    direction: str = Query("all", pattern="^(in|out|all)$", description="Credits, debits or both"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    rows, total = wallet_service.list_transactions(db, user.id, direction, page, page_size)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(row) for row in rows],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/checkout", status_code=status.HTTP_200_OK, response_model=CreateCheckoutSessionResponse)
def create_checkout_session(
    request: CreateCheckoutSessionRequest,
    user: User = Depends(get_current_user_obj),
):
    """
    Start a Stripe Checkout session for buying tokens.

    The wallet is credited by the webhook once Stripe confirms payment.
    """
    try:
        result = billing_service.create_token_checkout_session(
            user=user,
            tokens=request.tokens,
            success_url=request.success_url,
            cancel_url=request.cancel_url,
        )
    except GigzzError as e:
        raise to_http_exception(e)

    logger.info(f"Checkout session created for user {user.id}: {result['session_id']}")
    return CreateCheckoutSessionResponse(**result)
