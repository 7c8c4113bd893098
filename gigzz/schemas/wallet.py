"""
Pydantic schemas for wallet and billing endpoints.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from gigzz.core.token_pricing import MAX_TOKEN_PURCHASE, MIN_TOKEN_PURCHASE


class BalanceResponse(BaseModel):
    balance: int
    last_action: Optional[str] = None
    token_price: int = Field(..., description="Price of one token in naira")


class TransactionResponse(BaseModel):
    id: int
    description: str
    tokens_in: int
    tokens_out: int
    kind: str
    reference: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
    total: int
    page: int
    page_size: int


class CreateCheckoutSessionRequest(BaseModel):
    """Request schema for buying tokens."""
    tokens: int = Field(..., ge=MIN_TOKEN_PURCHASE, le=MAX_TOKEN_PURCHASE, description="Tokens to buy")
    success_url: Optional[str] = Field(None, description="URL to redirect after successful payment")
    cancel_url: Optional[str] = Field(None, description="URL to redirect if payment is canceled")

    class Config:
        json_schema_extra = {
            "example": {
                "tokens": 20,
                "success_url": "https://mygigzz.com/wallet?funded=1",
                "cancel_url": "https://mygigzz.com/wallet?cancelled=1"
            }
        }


class CreateCheckoutSessionResponse(BaseModel):
    """Response schema for checkout session creation."""
    checkout_url: str = Field(..., description="Stripe checkout session URL")
    session_id: str = Field(..., description="Stripe checkout session ID")
