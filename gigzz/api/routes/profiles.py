"""
Profile endpoints: own profile editor, public profiles and the applicant
directory.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db, get_current_user_obj, require_applicant, require_employer
from gigzz.core.errors import GigzzError, to_http_exception
from gigzz.db.models.user import User
from gigzz.schemas.job import PromoteRequest
from gigzz.schemas.profile import (
    ApplicantListResponse,
    ApplicantProfile,
    EmployerProfile,
    ProfileUpdate,
)
from gigzz.services import profile_service, promotion_service, storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def profile_to_response(user: User, profile):
    if user.is_employer:
        return EmployerProfile.model_validate(profile)
    return ApplicantProfile.model_validate(profile)


@router.get("/me")
def get_my_profile(user: User = Depends(get_current_user_obj), db: Session = Depends(get_db)):
    try:
        profile = profile_service.get_profile(db, user)
    except GigzzError as e:
        raise to_http_exception(e)
    return {"role": user.role, "profile": profile_to_response(user, profile)}


@router.put("/me")
def update_my_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        profile = profile_service.update_profile(db, user, payload.model_dump(exclude_unset=True))
    except GigzzError as e:
        db.rollback()
        raise to_http_exception(e)
    return {"role": user.role, "profile": profile_to_response(user, profile)}


@router.post("/me/avatar")
def upload_avatar(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Upload a profile picture (jpg, png, svg or webp, max 5 MB)."""
    try:
        url = storage_service.save_upload(file, "avatars", user.id)
        profile = profile_service.set_avatar(db, user, url)
    except GigzzError as e:
        raise to_http_exception(e)
    return {"avatar_url": profile.avatar_url}


@router.post("/me/id-card")
def upload_id_card(
    file: UploadFile = File(...),
    user: User = Depends(require_employer),
    db: Session = Depends(get_db)
):
    """Upload the employer's ID card (png or jpg, max 5 MB)."""
    try:
        url = storage_service.save_upload(file, "id_cards", user.id, storage_service.ID_CARD_TYPES)
    except GigzzError as e:
        raise to_http_exception(e)

    try:
        profile = profile_service.set_id_card(db, user, url)
    except GigzzError as e:
        storage_service.delete_uploads([url])
        raise to_http_exception(e)
    return {"id_card_url": profile.id_card_url}


@router.post("/me/promote", response_model=ApplicantProfile)
def promote_my_profile(
    payload: PromoteRequest,
    user: User = Depends(require_applicant),
    db: Session = Depends(get_db)
):
    """
    Feature the profile in the applicant directory. An active promotion is
    extended rather than replaced.
    """
    try:
        profile = promotion_service.promote_profile(db, user.id, payload.plan)
    except GigzzError as e:
        raise to_http_exception(e)
    return ApplicantProfile.model_validate(profile)


@router.get("/applicants", response_model=ApplicantListResponse)
def list_applicants(
    search: Optional[str] = Query(None, description="Search name, specialties and location"),
    sort_field: str = Query("full_name", pattern="^(full_name|created_at)$"),
    sort_direction: str = Query("asc", pattern="^(asc|desc)$"),
    promoted_first: bool = Query(False, description="List promoted applicants first"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db)
):
    try:
        applicants, total = profile_service.list_applicants(
            db,
            search=search,
            sort_field=sort_field,
            sort_direction=sort_direction,
            promoted_first=promoted_first,
            page=page,
            page_size=page_size,
        )
    except GigzzError as e:
        raise to_http_exception(e)

    return ApplicantListResponse(
        applicants=[ApplicantProfile.model_validate(applicant) for applicant in applicants],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/applicants/{applicant_id}", response_model=ApplicantProfile)
def get_applicant(applicant_id: int, db: Session = Depends(get_db)):
    try:
        return ApplicantProfile.model_validate(profile_service.get_applicant(db, applicant_id))
    except GigzzError as e:
        raise to_http_exception(e)


@router.get("/employers/{employer_id}", response_model=EmployerProfile)
def get_employer(employer_id: int, db: Session = Depends(get_db)):
    try:
        return EmployerProfile.model_validate(profile_service.get_employer(db, employer_id))
    except GigzzError as e:
        raise to_http_exception(e)
