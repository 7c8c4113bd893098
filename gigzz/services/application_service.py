"""
Job applications. Applying costs tokens; the debit and the application row are
written in one transaction.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from gigzz.core.errors import (
    ConflictError,
    ForbiddenError,
    GigzzError,
    ValidationFailedError,
)
from gigzz.core.token_pricing import APPLICATION_COST
from gigzz.db.models.application import Application
from gigzz.db.models.token_transaction import KIND_APPLICATION
from gigzz.db.models.user import User
from gigzz.services import job_service, wallet_service

logger = logging.getLogger(__name__)

MAX_COVER_LETTER_LENGTH = 1500


def has_applied(db: Session, job_id: int, applicant_id: int) -> bool:
    return db.query(Application.id).filter(
        Application.job_id == job_id,
        Application.applicant_id == applicant_id,
    ).first() is not None


def apply_to_job(
    db: Session,
    job_id: int,
    applicant: User,
    cover_letter: str,
    attachments: Optional[List[str]] = None,
    today: Optional[datetime] = None,
) -> Application:
    """
    Submit an application, charging APPLICATION_COST tokens.

    Raises:
        ForbiddenError: the account is a client account
        ConflictError: already applied
        ValidationFailedError: empty/oversized cover letter or closed deadline
        InsufficientTokensError: balance below APPLICATION_COST
    """
    job = job_service.get_job(db, job_id)

    if not applicant.is_applicant:
        raise ForbiddenError(
            "You cannot apply to jobs using a Client account. Please sign up as a Creative to apply."
        )
    if has_applied(db, job.id, applicant.id):
        raise ConflictError("You have already applied for this job.")

    cover_letter = (cover_letter or "").strip()
    if not cover_letter:
        raise ValidationFailedError("Please write a cover letter.")
    if len(cover_letter) > MAX_COVER_LETTER_LENGTH:
        raise ValidationFailedError(
            f"Cover letter cannot exceed {MAX_COVER_LETTER_LENGTH} characters.",
            {"length": len(cover_letter)},
        )

    today = (today or datetime.utcnow()).date()
    if job.application_deadline and job.application_deadline < today:
        raise ValidationFailedError("Applications for this job are closed.")

    try:
        wallet_service.debit(
            db,
            applicant.id,
            APPLICATION_COST,
            f"Application for {job.title}",
            kind=KIND_APPLICATION,
            commit=False,
        )
        application = Application(
            job_id=job.id,
            applicant_id=applicant.id,
            cover_letter=cover_letter,
            attachments=attachments or [],
        )
        db.add(application)
        db.flush()
        db.commit()
    except GigzzError:
        db.rollback()
        raise
    except IntegrityError as e:
        # Concurrent duplicate submit hit the unique constraint
        db.rollback()
        raise ConflictError("You have already applied for this job.") from e
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Application failed, rolled back: job_id={job_id}, user_id={applicant.id}", exc_info=True)
        raise

    db.refresh(application)
    logger.info(f"Application submitted: application_id={application.id}, job_id={job.id}, user_id={applicant.id}")
    return application


def list_applicant_applications(db: Session, applicant_id: int) -> List[Application]:
    return (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.applicant_id == applicant_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )


def list_job_applications(db: Session, job_id: int, employer: User) -> List[Application]:
    job_service.get_owned_job(db, job_id, employer)
    return (
        db.query(Application)
        .options(joinedload(Application.applicant))
        .filter(Application.job_id == job_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .all()
    )
