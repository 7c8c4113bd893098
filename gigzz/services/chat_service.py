"""
Direct messages between users.
"""
import logging
from typing import Dict, List

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from gigzz.core.errors import NotFoundError, ValidationFailedError
from gigzz.db.models.chat import ChatMessage
from gigzz.db.models.user import User

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


def _between(user_id: int, other_id: int):
    return or_(
        and_(ChatMessage.sender_id == user_id, ChatMessage.receiver_id == other_id),
        and_(ChatMessage.sender_id == other_id, ChatMessage.receiver_id == user_id),
    )


def send_message(db: Session, sender: User, receiver_id: int, body: str) -> ChatMessage:
    body = (body or "").strip()
    if not body:
        raise ValidationFailedError("Message cannot be empty")
    if len(body) > MAX_MESSAGE_LENGTH:
        raise ValidationFailedError(f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters")
    if receiver_id == sender.id:
        raise ValidationFailedError("You cannot message yourself")
    if not db.query(User.id).filter(User.id == receiver_id).first():
        raise NotFoundError("Recipient not found")

    message = ChatMessage(sender_id=sender.id, receiver_id=receiver_id, body=body)
    db.add(message)
    db.commit()
    db.refresh(message)

    logger.info(f"Message sent: message_id={message.id}, sender_id={sender.id}, receiver_id={receiver_id}")
    return message


def get_conversation(db: Session, user: User, other_id: int, mark_read: bool = True) -> List[ChatMessage]:
    """Messages between two users, oldest first. Marks the other side's messages read."""
    messages = (
        db.query(ChatMessage)
        .filter(_between(user.id, other_id))
        .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        .all()
    )

    if mark_read:
        updated = db.query(ChatMessage).filter(
            ChatMessage.sender_id == other_id,
            ChatMessage.receiver_id == user.id,
            ChatMessage.is_read.is_(False),
        ).update({ChatMessage.is_read: True}, synchronize_session="fetch")
        if updated:
            db.commit()

    return messages


def unread_count(db: Session, user: User) -> int:
    return db.query(ChatMessage).filter(
        ChatMessage.receiver_id == user.id,
        ChatMessage.is_read.is_(False),
    ).count()


def list_conversations(db: Session, user: User) -> List[Dict]:
    """
    Inbox: one entry per counterpart with the latest message and unread count,
    most recent conversation first.
    """
    messages = (
        db.query(ChatMessage)
        .filter(or_(ChatMessage.sender_id == user.id, ChatMessage.receiver_id == user.id))
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .all()
    )

    conversations: Dict[int, Dict] = {}
    for message in messages:
        other_id = message.receiver_id if message.sender_id == user.id else message.sender_id
        entry = conversations.get(other_id)
        if entry is None:
            entry = conversations[other_id] = {
                "user_id": other_id,
                "last_message": message,
                "unread": 0,
            }
        if message.receiver_id == user.id and not message.is_read:
            entry["unread"] += 1

    others = db.query(User).filter(User.id.in_(conversations.keys())).all() if conversations else []
    names = {other.id: other.display_name for other in others}
    for other_id, entry in conversations.items():
        entry["display_name"] = names.get(other_id)

    return list(conversations.values())
