"""
Pydantic schemas for job and application endpoints.
"""
from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

CATEGORY_PATTERN = "^(Remote|Hybrid|Onsite)$"
TYPE_PATTERN = "^(Freelance|Contract|Full-time|Part-time)$"
FREQUENCY_PATTERN = "^(One-time|Daily|Weekly|Monthly)$"


class JobBase(BaseModel):
    """Base job schema with common fields."""
    title: str = Field(..., description="Job title", min_length=1, max_length=255)
    category: str = Field(..., description="Work arrangement", pattern=CATEGORY_PATTERN)
    type: str = Field(..., description="Engagement type", pattern=TYPE_PATTERN)
    price_frequency: str = Field(default="One-time", pattern=FREQUENCY_PATTERN)
    application_deadline: Optional[date] = Field(None, description="Last day applications are accepted")
    description: Optional[str] = None
    responsibilities: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = None
    tags: Optional[List[str]] = Field(default_factory=list)


class JobCreate(JobBase):
    """
    Schema for creating a job. Give either min_price/max_price or a free-text
    price_range such as "₦50,000 - ₦100,000".
    """
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    price_range: Optional[str] = Field(None, description="Free-text price range")

    @model_validator(mode="after")
    def check_price(self):
        if self.price_range is None and self.min_price is None:
            raise ValueError("Provide min_price/max_price or price_range")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Brand identity designer",
                "category": "Remote",
                "type": "Contract",
                "price_range": "₦50,000 - ₦100,000",
                "price_frequency": "One-time",
                "application_deadline": "2026-12-01",
                "description": "Design a logo and brand kit for a fintech startup.",
                "tags": ["branding", "logo"]
            }
        }


class JobUpdate(BaseModel):
    """Schema for updating an existing job. Promotion fields are not editable."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, pattern=CATEGORY_PATTERN)
    type: Optional[str] = Field(None, pattern=TYPE_PATTERN)
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    price_range: Optional[str] = None
    price_frequency: Optional[str] = Field(None, pattern=FREQUENCY_PATTERN)
    application_deadline: Optional[date] = None
    description: Optional[str] = None
    responsibilities: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = None
    tags: Optional[List[str]] = None


class JobResponse(JobBase):
    """Schema for job response."""
    id: int = Field(..., description="Job ID")
    employer_id: int
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    price_range: Optional[str] = None
    promotion_tag: Optional[str] = Field(None, description="Active promotion tier, if any")
    promotion_expires_at: Optional[datetime] = None
    application_count: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobListResponse(BaseModel):
    """Schema for list of jobs response."""
    jobs: List[JobResponse] = Field(..., description="List of jobs")
    total: int = Field(..., description="Total number of matching jobs")
    page: int = Field(1, description="Current page number")
    page_size: int = Field(30, description="Number of items per page")


class PromoteRequest(BaseModel):
    plan: str = Field(..., description="Silver, Gold or Premium (case-insensitive)")

    class Config:
        json_schema_extra = {"example": {"plan": "Gold"}}


class PromotionResponse(BaseModel):
    id: int
    promotion_tag: Optional[str] = None
    promotion_expires_at: Optional[datetime] = None
    balance: int = Field(..., description="Wallet balance after the promotion")


class ApplicationResponse(BaseModel):
    id: int
    job_id: int
    applicant_id: int
    cover_letter: str
    attachments: Optional[List[str]] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    job_title: Optional[str] = None
    applicant_name: Optional[str] = None

    class Config:
        from_attributes = True
