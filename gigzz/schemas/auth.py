"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


def _check_password(v: str) -> str:
    """Validate password length in bytes (bcrypt limit is 72 bytes)."""
    password_bytes = v.encode("utf-8")
    if len(password_bytes) > 72:
        raise ValueError("Password too long (bcrypt limit 72 bytes)")
    if len(password_bytes) < 8:
        raise ValueError("Password must be at least 8 characters")
    return v


class SignupRequest(BaseModel):
    """Request schema for user signup."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="User's password (min 8 characters)")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: str = Field(..., description="'client' (posts jobs) or 'creative' (applies to jobs)",
                      pattern="^(client|creative|employer|applicant)$")
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password(v)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "ada@example.com",
                "password": "SecurePass123",
                "first_name": "Ada",
                "last_name": "Obi",
                "role": "creative",
                "country": "Nigeria",
                "state": "Lagos",
                "city": "Ikeja"
            }
        }


class SignupResponse(BaseModel):
    message: str
    user_id: int
    role: str
    email_sent: bool = Field(..., description="False when the verification email could not be sent")


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1)


class EmailRequest(BaseModel):
    """Body for resend-verification and password-reset requests."""
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)

    @field_validator("new_password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        return _check_password(v)


class MessageResponse(BaseModel):
    message: str


class MeResponse(BaseModel):
    id: int
    email: str
    role: str
    email_verified: bool
    is_admin: bool
    display_name: str
    token_balance: int = 0
