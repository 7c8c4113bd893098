"""
Job board endpoints.

Public listing and detail, employer CRUD, token-funded promotion and
applications.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db, get_current_user_obj, require_employer
from gigzz.core.errors import GigzzError, to_http_exception
from gigzz.db.models.job import Job
from gigzz.db.models.user import User
from gigzz.schemas.job import (
    ApplicationResponse,
    JobCreate,
    JobListResponse,
    JobResponse,
    JobUpdate,
    PromoteRequest,
    PromotionResponse,
)
from gigzz.services import (
    application_service,
    job_service,
    promotion_service,
    storage_service,
    wallet_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def job_to_response(job: Job, application_count: Optional[int] = None) -> JobResponse:
    """Serialize a job, exposing the promotion only while it is active."""
    response = JobResponse.model_validate(job)
    active = job.active_promotion(datetime.utcnow())
    return response.model_copy(update={
        "price_range": job_service.format_price_range(job),
        "promotion_tag": active,
        "promotion_expires_at": job.promotion_expires_at if active else None,
        "application_count": application_count,
    })


def application_to_response(application) -> ApplicationResponse:
    response = ApplicationResponse.model_validate(application)
    return response.model_copy(update={
        "job_title": application.job.title if application.job else None,
        "applicant_name": application.applicant.display_name if application.applicant else None,
    })


@router.get("", response_model=JobListResponse)
def list_jobs(
    category: Optional[str] = Query(None, description="Remote, Hybrid or Onsite"),
    search: Optional[str] = Query(None, description="Search in title, description, category, location and tags"),
    topic: Optional[str] = Query(None, description="Topic keyword group, e.g. 'Design & Creative'"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(job_service.DEFAULT_PAGE_SIZE, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db)
):
    """
    Public job board, actively promoted jobs first (Premium, Gold, Silver),
    then newest.
    """
    jobs, total = job_service.list_jobs(
        db, category=category, search=search, topic=topic, page=page, page_size=page_size
    )
    return JobListResponse(
        jobs=[job_to_response(job) for job in jobs],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/mine", response_model=JobListResponse)
def list_my_jobs(
    page: int = Query(1, ge=1),
    page_size: int = Query(job_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    user: User = Depends(require_employer),
    db: Session = Depends(get_db)
):
    jobs, total = job_service.list_jobs(db, employer_id=user.id, page=page, page_size=page_size)
    return JobListResponse(
        jobs=[job_to_response(job, job_service.application_count(db, job.id)) for job in jobs],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobResponse)
def create_job(
    job_data: JobCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Post a job. Client accounts only."""
    try:
        job = job_service.create_job(db, user, job_data.model_dump(exclude_none=True))
        return job_to_response(job, 0)
    except GigzzError as e:
        db.rollback()
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create job: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create job"
        )


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    try:
        job = job_service.get_job(db, job_id)
    except GigzzError as e:
        raise to_http_exception(e)
    return job_to_response(job, job_service.application_count(db, job.id))


@router.put("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    job_data: JobUpdate,
    user: User = Depends(require_employer),
    db: Session = Depends(get_db)
):
    try:
        job = job_service.update_job(db, job_id, user, job_data.model_dump(exclude_unset=True))
        return job_to_response(job, job_service.application_count(db, job.id))
    except GigzzError as e:
        db.rollback()
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update job {job_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update job"
        )


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job(
    job_id: int,
    user: User = Depends(require_employer),
    db: Session = Depends(get_db)
):
    try:
        job_service.delete_job(db, job_id, user)
    except GigzzError as e:
        db.rollback()
        raise to_http_exception(e)
    return None


@router.post("/{job_id}/promote", response_model=PromotionResponse)
def promote_job(
    job_id: int,
    payload: PromoteRequest,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """
    Spend tokens to promote a job for a fixed tier.

    - Silver: 5 tokens, 3 days
    - Gold: 10 tokens, 7 days
    - Premium: 20 tokens, 20 days

    Returns 402 when the wallet cannot cover the plan and 409 while an earlier
    promotion is still running.
    """
    try:
        job = promotion_service.promote_job(db, job_id, payload.plan, user.id)
    except GigzzError as e:
        raise to_http_exception(e)

    return PromotionResponse(
        id=job.id,
        promotion_tag=job.promotion_tag,
        promotion_expires_at=job.promotion_expires_at,
        balance=wallet_service.get_balance(db, user.id),
    )


@router.post("/{job_id}/apply", status_code=status.HTTP_201_CREATED, response_model=ApplicationResponse)
def apply_to_job(
    job_id: int,
    cover_letter: str = Form(...),
    attachments: Optional[List[UploadFile]] = File(None),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Apply with a cover letter and optional files. Costs 3 tokens."""
    try:
        urls = storage_service.save_uploads(
            attachments or [], "attachments", user.id, storage_service.ATTACHMENT_TYPES
        )
    except GigzzError as e:
        raise to_http_exception(e)

    try:
        application = application_service.apply_to_job(db, job_id, user, cover_letter, urls)
    except GigzzError as e:
        storage_service.delete_uploads(urls)
        raise to_http_exception(e)
    except SQLAlchemyError:
        storage_service.delete_uploads(urls)
        raise
    return application_to_response(application)


@router.get("/{job_id}/applicants", response_model=List[ApplicationResponse])
def list_applicants(
    job_id: int,
    user: User = Depends(require_employer),
    db: Session = Depends(get_db)
):
    try:
        applications = application_service.list_job_applications(db, job_id, user)
    except GigzzError as e:
        raise to_http_exception(e)
    return [application_to_response(application) for application in applications]
