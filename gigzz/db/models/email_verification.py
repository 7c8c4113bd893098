from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from gigzz.db.base import Base

PURPOSE_SIGNUP = "signup"
PURPOSE_PASSWORD_RESET = "password_reset"


class EmailVerification(Base):
    """One-time token mailed to a user for signup verification or password reset."""
    __tablename__ = "email_verifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String, nullable=False)
    token = Column(String, unique=True, nullable=False, index=True)
    purpose = Column(String, nullable=False, default=PURPOSE_SIGNUP)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
