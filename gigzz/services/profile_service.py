"""
Applicant and employer profiles, the applicant directory and portfolio projects.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from gigzz.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from gigzz.db.models.profile import Applicant, Employer
from gigzz.db.models.project import Project
from gigzz.db.models.user import User

logger = logging.getLogger(__name__)

APPLICANT_FIELDS = ("full_name", "phone", "country", "state", "city", "bio", "specialist", "specialties")
EMPLOYER_FIELDS = ("name", "company_name", "country", "state", "city", "bio", "website")

SORT_FIELDS = {
    "full_name": Applicant.full_name,
    "created_at": Applicant.created_at,
}


def get_profile(db: Session, user: User):
    """Role-appropriate profile row for a user."""
    model = Employer if user.is_employer else Applicant
    profile = db.query(model).filter(model.id == user.id).first()
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


def update_profile(db: Session, user: User, data: Dict):
    profile = get_profile(db, user)
    allowed = EMPLOYER_FIELDS if user.is_employer else APPLICANT_FIELDS

    for field, value in data.items():
        if field not in allowed:
            continue
        if field in ("full_name", "name") and not (value or "").strip():
            raise ValidationFailedError("Name cannot be empty")
        setattr(profile, field, value)

    db.commit()
    db.refresh(profile)
    logger.info(f"Profile updated: user_id={user.id}, fields={sorted(data.keys())}")
    return profile


def set_avatar(db: Session, user: User, url: str):
    profile = get_profile(db, user)
    profile.avatar_url = url
    db.commit()
    db.refresh(profile)
    return profile


def set_id_card(db: Session, user: User, url: str) -> Employer:
    """Store an employer's ID card image."""
    if not user.is_employer:
        raise ForbiddenError("Only employers can upload an ID card")
    profile = get_profile(db, user)
    profile.id_card_url = url
    db.commit()
    db.refresh(profile)
    logger.info(f"ID card uploaded: user_id={user.id}")
    return profile


def get_applicant(db: Session, applicant_id: int) -> Applicant:
    profile = db.query(Applicant).filter(Applicant.id == applicant_id).first()
    if not profile:
        raise NotFoundError("Applicant not found")
    return profile


def get_employer(db: Session, employer_id: int) -> Employer:
    profile = db.query(Employer).filter(Employer.id == employer_id).first()
    if not profile:
        raise NotFoundError("Employer not found")
    return profile


def list_applicants(
    db: Session,
    search: Optional[str] = None,
    sort_field: str = "full_name",
    sort_direction: str = "asc",
    promoted_first: bool = False,
    page: int = 1,
    page_size: int = 20,
    now: Optional[datetime] = None,
) -> Tuple[List[Applicant], int]:
    """
    Applicant directory with search over name, headline and location.

    Specialties are a JSON list, so matching happens in Python.
    """
    if sort_field not in SORT_FIELDS:
        raise ValidationFailedError("sort_field must be 'full_name' or 'created_at'")
    column = SORT_FIELDS[sort_field]
    order = column.desc() if sort_direction == "desc" else column.asc()

    query = db.query(Applicant)
    applicants = query.order_by(order, Applicant.id.asc()).all()

    if search and search.strip():
        needle = search.strip().lower()
        applicants = [
            applicant for applicant in applicants
            if needle in " ".join(
                part for part in (
                    applicant.full_name,
                    applicant.specialist,
                    applicant.location,
                    " ".join(applicant.specialties or []),
                ) if part
            ).lower()
        ]

    if promoted_first:
        now = now or datetime.utcnow()
        # stable sort keeps the requested order inside each group
        applicants = sorted(
            applicants,
            key=lambda applicant: 0 if applicant.promoted_until and applicant.promoted_until > now else 1,
        )

    offset = (page - 1) * page_size
    return applicants[offset:offset + page_size], len(applicants)


def create_project(db: Session, user: User, data: Dict) -> Project:
    if not (data.get("title") or "").strip():
        raise ValidationFailedError("Project title is required")

    project = Project(
        user_id=user.id,
        title=data["title"].strip(),
        description=data.get("description"),
        cover_url=data.get("cover_url"),
        link=data.get("link"),
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info(f"Project created: project_id={project.id}, user_id={user.id}")
    return project


def get_project(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project not found")
    return project


def list_projects(db: Session, user_id: Optional[int] = None, now: Optional[datetime] = None) -> List[Project]:
    """Projects, actively promoted first, then newest."""
    now = now or datetime.utcnow()
    query = db.query(Project)
    if user_id is not None:
        query = query.filter(Project.user_id == user_id)
    projects = query.order_by(Project.created_at.desc(), Project.id.desc()).all()
    return sorted(
        projects,
        key=lambda project: 0 if project.promote and project.promote_expires_at and project.promote_expires_at > now else 1,
    )


def set_project_cover(db: Session, project_id: int, user: User, url: str) -> Tuple[Project, Optional[str]]:
    """Replace a project's cover image. Returns the project and the old cover URL."""
    project = get_project(db, project_id)
    if project.user_id != user.id:
        raise ForbiddenError("You can only edit your own projects")

    old_url = project.cover_url
    project.cover_url = url
    db.commit()
    db.refresh(project)
    logger.info(f"Project cover updated: project_id={project.id}, user_id={user.id}")
    return project, old_url
