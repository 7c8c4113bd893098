from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db, get_current_user_obj
from gigzz.core.errors import GigzzError, to_http_exception
from gigzz.db.models.user import User
from gigzz.schemas.chat import (
    ConversationSummary,
    MessageCreate,
    MessageResponse,
    UnreadCountResponse,
)
from gigzz.services import chat_service

router = APIRouter(prefix="/chats", tags=["Chats"])


def message_to_response(message, user: User) -> MessageResponse:
    response = MessageResponse.model_validate(message)
    return response.model_copy(update={"is_sender": message.sender_id == user.id})


@router.get("", response_model=List[ConversationSummary])
def inbox(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    return [
        ConversationSummary(
            user_id=entry["user_id"],
            display_name=entry["display_name"],
            last_message=message_to_response(entry["last_message"], user),
            unread=entry["unread"],
        )
        for entry in chat_service.list_conversations(db, user)
    ]


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    return UnreadCountResponse(unread=chat_service.unread_count(db, user))


@router.get("/{other_id}", response_model=List[MessageResponse])
def conversation(other_id: int, user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    """Messages with another user, oldest first. Marks their messages as read."""
    messages = chat_service.get_conversation(db, user, other_id)
    return [message_to_response(message, user) for message in messages]


@router.post("/{other_id}", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def send_message(
    other_id: int,
    payload: MessageCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        message = chat_service.send_message(db, user, other_id, payload.body)
    except GigzzError as e:
        raise to_http_exception(e)
    return message_to_response(message, user)
