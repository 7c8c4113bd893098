from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from gigzz.db.base import Base

ROLE_EMPLOYER = "employer"
ROLE_APPLICANT = "applicant"
ROLES = (ROLE_EMPLOYER, ROLE_APPLICANT)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, index=True)  # employer | applicant, fixed at signup
    email_verified = Column(Boolean, default=False, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    applicant_profile = relationship("Applicant", back_populates="user", uselist=False, cascade="all, delete-orphan")
    employer_profile = relationship("Employer", back_populates="user", uselist=False, cascade="all, delete-orphan")
    wallet = relationship("TokenWallet", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def is_employer(self) -> bool:
        return self.role == ROLE_EMPLOYER

    @property
    def is_applicant(self) -> bool:
        return self.role == ROLE_APPLICANT

    @property
    def display_name(self) -> str:
        if self.applicant_profile and self.applicant_profile.full_name:
            return self.applicant_profile.full_name
        if self.employer_profile and self.employer_profile.name:
            return self.employer_profile.name
        return self.email

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
