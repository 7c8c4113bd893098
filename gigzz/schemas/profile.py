"""
Pydantic schemas for profiles, the applicant directory and projects.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class ApplicantProfile(BaseModel):
    id: int
    full_name: str
    phone: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    location: str = ""
    bio: Optional[str] = None
    specialist: Optional[str] = None
    specialties: Optional[List[str]] = Field(default_factory=list)
    avatar_url: Optional[str] = None
    promoted_until: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmployerProfile(BaseModel):
    id: int
    name: str
    company_name: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    location: str = ""
    bio: Optional[str] = None
    website: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """
    Profile editor payload. Fields that do not apply to the caller's role are
    ignored.
    """
    full_name: Optional[str] = Field(None, max_length=200)
    name: Optional[str] = Field(None, max_length=200)
    company_name: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=2000)
    specialist: Optional[str] = None
    specialties: Optional[List[str]] = None
    website: Optional[str] = None


class ApplicantListResponse(BaseModel):
    applicants: List[ApplicantProfile]
    total: int
    page: int
    page_size: int


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    cover_url: Optional[str] = None
    link: Optional[str] = None


class ProjectResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    cover_url: Optional[str] = None
    link: Optional[str] = None
    promote: Optional[str] = None
    promote_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
