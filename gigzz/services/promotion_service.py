"""
Promotion service: spend tokens to boost jobs, applicant profiles and projects.

Each promotion is one unit of work: the wallet row is locked, the balance is
checked, the debit is written to the ledger and the promoted row is updated,
then a single commit. Any failure rolls the whole unit back, so tokens are
never spent without the promotion being applied.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gigzz.core.errors import (
    AlreadyPromotedError,
    ForbiddenError,
    GigzzError,
    InsufficientTokensError,
    NotFoundError,
    PromotionFailedError,
    ValidationFailedError,
)
from gigzz.core.token_pricing import (
    JOB_PROMOTION_PLANS,
    PROJECT_PROMOTION_COST,
    PROJECT_PROMOTION_DAYS,
    PROJECT_PROMOTION_TAG,
    get_profile_plan,
    job_plan_names,
    normalize_job_plan,
)
from gigzz.db.models.job import Job
from gigzz.db.models.profile import Applicant
from gigzz.db.models.project import Project
from gigzz.db.models.token_transaction import KIND_PROMOTION
from gigzz.services import wallet_service

logger = logging.getLogger(__name__)


def _apply_job_promotion(db: Session, job: Job, plan: str, expires_at: datetime) -> None:
    job.promotion_tag = plan
    job.promotion_expires_at = expires_at
    db.flush()


def promote_job(
    db: Session,
    job_id: int,
    plan: str,
    user_id: int,
    now: Optional[datetime] = None,
) -> Job:
    """
    Promote a job for a fixed tier.

    Preconditions, in order: balance >= plan cost, then no unexpired promotion.

    Args:
        db: Database session
        job_id: Job to promote (must belong to user_id)
        plan: "Silver", "Gold" or "Premium" (case-insensitive)
        user_id: Acting employer
        now: Request time (defaults to utcnow)

    Returns:
        The promoted job

    Raises:
        ValidationFailedError: unknown plan
        NotFoundError / ForbiddenError: job missing or not owned
        InsufficientTokensError: balance below plan cost
        AlreadyPromotedError: job has an unexpired promotion
        PromotionFailedError: a write failed; nothing was applied
    """
    now = now or datetime.utcnow()
    plan_name = normalize_job_plan(plan)
    if plan_name is None:
        raise ValidationFailedError(
            f"Unknown promotion plan: {plan}",
            {"plans": job_plan_names()},
        )
    tier = JOB_PROMOTION_PLANS[plan_name]

    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    if job.employer_id != user_id:
        raise ForbiddenError("You can only promote your own jobs")

    try:
        wallet = wallet_service.get_wallet(db, user_id, lock=True)
        # lock order: wallet, then job
        db.refresh(job, with_for_update=True)
        balance = wallet.balance if wallet else 0
        if balance < tier["cost"]:
            raise InsufficientTokensError(
                "Insufficient tokens for this promotion plan.",
                {"balance": balance, "required": tier["cost"], "plan": plan_name},
            )

        active = job.active_promotion(now)
        if active:
            raise AlreadyPromotedError(
                f"This job is already promoted ({active}) until {job.promotion_expires_at.isoformat()}.",
                {"promotion_tag": active, "promotion_expires_at": job.promotion_expires_at.isoformat()},
            )

        wallet_service.debit(
            db,
            user_id,
            tier["cost"],
            f"Job promotion ({plan_name}): {job.title}",
            kind=KIND_PROMOTION,
            commit=False,
        )
        _apply_job_promotion(db, job, plan_name, now + timedelta(days=tier["days"]))
        db.commit()
    except GigzzError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Job promotion failed, rolled back: job_id={job_id}, user_id={user_id}: {e}", exc_info=True)
        raise PromotionFailedError("Failed to promote job. No tokens were deducted.") from e

    db.refresh(job)
    logger.info(
        f"Job promoted: job_id={job.id}, user_id={user_id}, plan={plan_name}, "
        f"cost={tier['cost']}, expires_at={job.promotion_expires_at.isoformat()}"
    )
    return job


def promote_profile(
    db: Session,
    user_id: int,
    plan: str,
    now: Optional[datetime] = None,
) -> Applicant:
    """
    Promote an applicant profile. An active promotion is extended from its
    current expiry rather than rejected.
    """
    now = now or datetime.utcnow()
    tier = get_profile_plan(plan)
    if tier is None:
        raise ValidationFailedError(f"Unknown promotion plan: {plan}")

    profile = db.query(Applicant).filter(Applicant.id == user_id).first()
    if not profile:
        raise NotFoundError("Applicant profile not found")

    try:
        wallet_service.get_wallet(db, user_id, lock=True)
        db.refresh(profile, with_for_update=True)
        wallet_service.debit(
            db,
            user_id,
            tier["cost"],
            f"Profile promotion, {plan.strip().lower()}",
            kind=KIND_PROMOTION,
            commit=False,
        )
        start = profile.promoted_until if profile.promoted_until and profile.promoted_until > now else now
        profile.promoted_until = start + timedelta(days=tier["days"])
        db.flush()
        db.commit()
    except GigzzError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Profile promotion failed, rolled back: user_id={user_id}: {e}", exc_info=True)
        raise PromotionFailedError("Promotion failed. Please try again.") from e

    db.refresh(profile)
    logger.info(f"Profile promoted: user_id={user_id}, plan={plan}, until={profile.promoted_until.isoformat()}")
    return profile


def promote_project(
    db: Session,
    project_id: int,
    user_id: int,
    now: Optional[datetime] = None,
) -> Project:
    """Promote a portfolio project for a flat cost and duration."""
    now = now or datetime.utcnow()

    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    if project.user_id != user_id:
        raise ForbiddenError("You can only promote your own projects")

    try:
        wallet_service.get_wallet(db, user_id, lock=True)
        db.refresh(project, with_for_update=True)
        if project.promote and project.promote_expires_at and project.promote_expires_at > now:
            raise AlreadyPromotedError(
                "This project is already promoted.",
                {"promote_expires_at": project.promote_expires_at.isoformat()},
            )

        wallet_service.debit(
            db,
            user_id,
            PROJECT_PROMOTION_COST,
            f"Project promotion: {project.title}",
            kind=KIND_PROMOTION,
            commit=False,
        )
        project.promote = PROJECT_PROMOTION_TAG
        project.promote_expires_at = now + timedelta(days=PROJECT_PROMOTION_DAYS)
        db.flush()
        db.commit()
    except GigzzError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Project promotion failed, rolled back: project_id={project_id}: {e}", exc_info=True)
        raise PromotionFailedError("Failed to promote project.") from e

    db.refresh(project)
    logger.info(f"Project promoted: project_id={project.id}, user_id={user_id}")
    return project
