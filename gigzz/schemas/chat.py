"""
Pydantic schemas for chat endpoints.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    body: str = Field(..., min_length=1, max_length=2000)


class MessageResponse(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    body: str
    is_read: bool
    is_sender: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ConversationSummary(BaseModel):
    user_id: int
    display_name: Optional[str] = None
    last_message: MessageResponse
    unread: int


class UnreadCountResponse(BaseModel):
    unread: int
