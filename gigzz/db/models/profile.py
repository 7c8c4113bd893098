"""
Role profiles, 1:1 with users.id.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from gigzz.db.base import Base


class Applicant(Base):
    """Creative profile shown on applications and in the applicant directory."""
    __tablename__ = "applicants"

    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=True)
    country = Column(String, nullable=True)
    state = Column(String, nullable=True)
    city = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    specialist = Column(String, nullable=True)  # headline, e.g. "Motion designer"
    specialties = Column(JSON, nullable=True, default=list)
    avatar_url = Column(String, nullable=True)
    promoted_until = Column(DateTime, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="applicant_profile")

    @property
    def location(self) -> str:
        return ", ".join(part for part in (self.city, self.state, self.country) if part)


class Employer(Base):
    """Client profile shown on job posts."""
    __tablename__ = "employers"

    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String, nullable=False)
    company_name = Column(String, nullable=True, index=True)
    country = Column(String, nullable=True)
    state = Column(String, nullable=True)
    city = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    website = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    id_card_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="employer_profile")

    @property
    def location(self) -> str:
        return ", ".join(part for part in (self.city, self.state, self.country) if part)
