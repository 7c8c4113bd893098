from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from gigzz.db.base import Base

KIND_FUNDING = "funding"
KIND_PROMOTION = "promotion"
KIND_APPLICATION = "application"
KIND_ADJUSTMENT = "adjustment"


class TokenTransaction(Base):
    """
    Append-only token ledger.

    Exactly one of tokens_in / tokens_out is non-zero. A wallet's balance
    always equals sum(tokens_in) - sum(tokens_out) over its user's rows.
    """
    __tablename__ = "token_transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String, nullable=False)
    tokens_in = Column(Integer, default=0, nullable=False)
    tokens_out = Column(Integer, default=0, nullable=False)
    kind = Column(String, nullable=False, index=True)  # funding | promotion | application | adjustment
    reference = Column(String, unique=True, nullable=True)  # payment session id for funding rows
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User")

    __table_args__ = (
        Index("idx_token_tx_user_created", "user_id", "created_at"),
    )

    @property
    def signed_amount(self) -> int:
        return (self.tokens_in or 0) - (self.tokens_out or 0)
