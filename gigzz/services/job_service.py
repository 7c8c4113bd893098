"""
Job service: employer CRUD and the public job board listing.
"""
import logging
import re
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from gigzz.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from gigzz.core.token_pricing import promotion_rank
from gigzz.db.models.application import Application
from gigzz.db.models.job import Job
from gigzz.db.models.user import User

logger = logging.getLogger(__name__)

JOB_CATEGORIES = ["Remote", "Hybrid", "Onsite"]
JOB_TYPES = ["Freelance", "Contract", "Full-time", "Part-time"]
PRICE_FREQUENCIES = ["One-time", "Daily", "Weekly", "Monthly"]

# Keyword groups for the "browse by topic" filter on the job board
TOPIC_KEYWORDS: Dict[str, List[str]] = {
    "Design & Creative": ["design", "creative", "creatives", "ui", "ux", "illustration", "photoshop", "figma"],
    "Development & IT": [
        "development", "developer", "frontend", "backend", "fullstack",
        "software", "engineer", "it", "programmer", "devops",
    ],
    "Marketing & Sales": ["marketing", "sales", "seo", "advertising", "growth", "campaign", "brand", "outreach"],
    "Writing & Translation": [
        "writing", "writer", "translation", "content", "copywriting", "editing", "proofreading", "blog",
    ],
    "Customer Support": ["customer support", "helpdesk", "service", "support", "csr", "call center"],
    "Finance & Accounting": ["finance", "accounting", "bookkeeping", "budget", "tax", "financial", "audit"],
    "Legal Services": ["legal", "law", "compliance", "contract", "lawyer", "paralegal"],
    "Engineering": ["engineer", "mechanical", "electrical", "civil", "hardware", "systems"],
}

DEFAULT_PAGE_SIZE = 30

# Fields an employer may set through the job form; promotion fields are excluded
EDITABLE_FIELDS = (
    "title", "category", "type", "min_price", "max_price", "price_frequency",
    "application_deadline", "description", "responsibilities", "requirements",
    "location", "tags",
)

_PRICE_PART = re.compile(r"[₦#,\s]")


def parse_price_range(value: str) -> Tuple[int, int]:
    """
    Parse a free-text range such as "₦50,000 - ₦100,000" into (min, max).

    A single number is treated as a fixed price (min == max).
    """
    parts = [_PRICE_PART.sub("", part) for part in value.split("-")]
    parts = [part for part in parts if part]
    try:
        numbers = [int(float(part)) for part in parts]
    except ValueError:
        raise ValidationFailedError("Price range must look like '50000 - 100000'", {"price_range": value})

    if len(numbers) == 1:
        return numbers[0], numbers[0]
    if len(numbers) != 2:
        raise ValidationFailedError("Price range must look like '50000 - 100000'", {"price_range": value})

    low, high = numbers
    if low > high:
        raise ValidationFailedError("Minimum price cannot exceed maximum price", {"price_range": value})
    return low, high


def format_price_range(job: Job) -> Optional[str]:
    if job.min_price is None and job.max_price is None:
        return None
    if job.min_price == job.max_price or job.max_price is None:
        return f"₦{job.min_price:,}"
    return f"₦{job.min_price:,} - ₦{job.max_price:,}"


def get_job(db: Session, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return job


def get_owned_job(db: Session, job_id: int, user: User) -> Job:
    job = get_job(db, job_id)
    if job.employer_id != user.id:
        raise ForbiddenError("You do not own this job")
    return job


def _normalize_fields(data: Dict) -> Dict:
    price_range = data.pop("price_range", None)
    if price_range:
        data["min_price"], data["max_price"] = parse_price_range(price_range)

    low, high = data.get("min_price"), data.get("max_price")
    if low is not None and high is not None and low > high:
        raise ValidationFailedError("Minimum price cannot exceed maximum price")

    if "tags" in data and data["tags"] is not None:
        data["tags"] = [tag.strip() for tag in data["tags"] if tag and tag.strip()]

    return {key: value for key, value in data.items() if key in EDITABLE_FIELDS}


def create_job(db: Session, employer: User, data: Dict) -> Job:
    if not employer.is_employer:
        raise ForbiddenError("Only client accounts can post jobs")

    fields = _normalize_fields(dict(data))
    if fields.get("min_price") is None:
        raise ValidationFailedError("Job title and price range are required.")

    job = Job(employer_id=employer.id, **fields)
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info(f"Job created: job_id={job.id}, employer_id={employer.id}, title={job.title}")
    return job


def update_job(db: Session, job_id: int, employer: User, data: Dict) -> Job:
    job = get_owned_job(db, job_id, employer)

    fields = _normalize_fields(dict(data))
    low = fields.get("min_price", job.min_price)
    high = fields.get("max_price", job.max_price)
    if low is not None and high is not None and low > high:
        raise ValidationFailedError("Minimum price cannot exceed maximum price")

    for field, value in fields.items():
        setattr(job, field, value)

    db.commit()
    db.refresh(job)

    logger.info(f"Job updated: job_id={job.id}, employer_id={employer.id}")
    return job


def delete_job(db: Session, job_id: int, employer: User) -> None:
    job = get_owned_job(db, job_id, employer)
    db.delete(job)
    db.commit()
    logger.info(f"Job deleted: job_id={job_id}, employer_id={employer.id}")


def application_count(db: Session, job_id: int) -> int:
    return db.query(func.count(Application.id)).filter(Application.job_id == job_id).scalar() or 0


def _matches_search(job: Job, search: str) -> bool:
    needle = search.lower()
    fields = [job.title, job.description, job.category, job.location, " ".join(job.tags or [])]
    return any(field and needle in field.lower() for field in fields)


def _matches_topic(job: Job, topic: str) -> bool:
    keywords = TOPIC_KEYWORDS.get(topic)
    if keywords is None:
        return True
    searchable = " ".join(
        part for part in (job.title, job.description, job.category, " ".join(job.tags or [])) if part
    ).lower()
    return any(keyword in searchable for keyword in keywords)


def rank_jobs(jobs: List[Job], now: Optional[datetime] = None) -> List[Job]:
    """
    Order jobs for the board: active Premium, Gold, Silver, then everything
    else; newest first within each rank. Expired promotions rank as none.
    """
    now = now or datetime.utcnow()
    newest_first = sorted(jobs, key=lambda job: (job.created_at or datetime.min, job.id), reverse=True)
    return sorted(newest_first, key=lambda job: promotion_rank(job.active_promotion(now)))


def list_jobs(
    db: Session,
    category: Optional[str] = None,
    search: Optional[str] = None,
    topic: Optional[str] = None,
    employer_id: Optional[int] = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    now: Optional[datetime] = None,
) -> Tuple[List[Job], int]:
    """
    Job board listing.

    Category is matched in SQL; free-text search and topic keywords are
    matched in Python over title, description, category, location and tags.

    Returns:
        (jobs for the requested page, total matching jobs)
    """
    query = db.query(Job)
    if category:
        query = query.filter(func.lower(Job.category) == category.strip().lower())
    if employer_id is not None:
        query = query.filter(Job.employer_id == employer_id)

    jobs = query.all()
    if search and search.strip():
        jobs = [job for job in jobs if _matches_search(job, search.strip())]
    if topic and topic != "All Jobs":
        jobs = [job for job in jobs if _matches_topic(job, topic)]

    ranked = rank_jobs(jobs, now)
    offset = (page - 1) * page_size

    logger.debug(f"Jobs listed: total={len(ranked)}, page={page}, category={category}, topic={topic}")
    return ranked[offset:offset + page_size], len(ranked)
