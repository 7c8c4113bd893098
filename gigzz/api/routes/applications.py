from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gigzz.api.routes.jobs import application_to_response
from gigzz.core.auth_dependency import get_db, require_applicant
from gigzz.db.models.user import User
from gigzz.schemas.job import ApplicationResponse
from gigzz.services import application_service

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("/mine", response_model=List[ApplicationResponse])
def my_applications(
    user: User = Depends(require_applicant),
    db: Session = Depends(get_db)
):
    applications = application_service.list_applicant_applications(db, user.id)
    return [application_to_response(application) for application in applications]
