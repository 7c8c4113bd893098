"""
Job model: a post by an employer, optionally promoted with tokens.
"""
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, JSON, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from gigzz.db.base import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False, index=True)  # Remote | Hybrid | Onsite
    type = Column(String, nullable=False)  # Freelance | Contract | Full-time | Part-time
    min_price = Column(Integer, nullable=True)
    max_price = Column(Integer, nullable=True)
    price_frequency = Column(String, nullable=False, default="One-time")
    application_deadline = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    responsibilities = Column(Text, nullable=True)
    requirements = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    tags = Column(JSON, nullable=True, default=list)

    # Written only by the promotion service
    promotion_tag = Column(String, nullable=True, index=True)  # Silver | Gold | Premium
    promotion_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    employer = relationship("User", backref="jobs")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_jobs_promotion", "promotion_tag", "promotion_expires_at"),
    )

    def active_promotion(self, now):
        """Promotion tag if the promotion has not expired at `now`, else None."""
        if self.promotion_tag and self.promotion_expires_at and self.promotion_expires_at > now:
            return self.promotion_tag
        return None

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', promotion_tag={self.promotion_tag!r})>"
