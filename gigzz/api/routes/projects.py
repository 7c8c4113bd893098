from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db, get_current_user_obj
from gigzz.core.errors import GigzzError, to_http_exception
from gigzz.db.models.user import User
from gigzz.schemas.profile import ProjectCreate, ProjectResponse
from gigzz.services import profile_service, promotion_service, storage_service

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProjectResponse)
def create_project(
    payload: ProjectCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        project = profile_service.create_project(db, user, payload.model_dump())
    except GigzzError as e:
        raise to_http_exception(e)
    return ProjectResponse.model_validate(project)


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    user_id: Optional[int] = Query(None, description="Only this user's projects"),
    db: Session = Depends(get_db)
):
    return [ProjectResponse.model_validate(project) for project in profile_service.list_projects(db, user_id)]


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: int, db: Session = Depends(get_db)):
    try:
        return ProjectResponse.model_validate(profile_service.get_project(db, project_id))
    except GigzzError as e:
        raise to_http_exception(e)


@router.post("/{project_id}/cover", response_model=ProjectResponse)
def upload_project_cover(
    project_id: int,
    file: UploadFile = File(...),
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Upload a cover image; the previous stored cover is removed."""
    try:
        url = storage_service.save_upload(file, "projects", user.id)
    except GigzzError as e:
        raise to_http_exception(e)

    try:
        project, old_url = profile_service.set_project_cover(db, project_id, user, url)
    except GigzzError as e:
        storage_service.delete_uploads([url])
        raise to_http_exception(e)

    if old_url:
        storage_service.delete_uploads([old_url])
    return ProjectResponse.model_validate(project)


@router.post("/{project_id}/promote", response_model=ProjectResponse)
def promote_project(
    project_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    """Feature a project for 7 days. Costs 5 tokens."""
    try:
        project = promotion_service.promote_project(db, project_id, user.id)
    except GigzzError as e:
        raise to_http_exception(e)
    return ProjectResponse.model_validate(project)
