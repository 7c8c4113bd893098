"""
Pydantic schemas for admin and content endpoints.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class DailyFunding(BaseModel):
    date: str
    tokens: int
    transactions: int
    revenue: int


class StatsResponse(BaseModel):
    total_users: int
    total_applicants: int
    total_employers: int
    total_jobs: int
    total_applications: int
    tokens_sold: int
    revenue: int = Field(..., description="tokens_sold x TOKEN_PRICE")
    tokens_spent: int
    last_7_days: List[DailyFunding]


class AdminTransaction(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    email: str
    description: str
    tokens_in: int
    tokens_out: int
    kind: str
    created_at: Optional[datetime] = None


class AdjustRequest(BaseModel):
    tokens: int = Field(..., description="Signed amount; negative values debit")
    reason: str = Field(..., min_length=1, max_length=200)


class ReconcileResponse(BaseModel):
    user_id: int
    wallet_balance: int
    ledger_balance: int
    drift: int
    repaired: bool


class NewsResponse(BaseModel):
    id: int
    title: str
    body: str
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LearnMoreCreate(BaseModel):
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    category: Optional[str] = None


class LearnMoreResponse(BaseModel):
    id: int
    title: str
    category: Optional[str] = None
    body: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
