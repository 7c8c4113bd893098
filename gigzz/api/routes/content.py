from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gigzz.core.auth_dependency import get_db
from gigzz.schemas.admin import LearnMoreResponse, NewsResponse
from gigzz.services import content_service

router = APIRouter(prefix="/content", tags=["Content"])


@router.get("/news", response_model=List[NewsResponse])
def list_news(limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db)):
    return [NewsResponse.model_validate(news) for news in content_service.list_news(db, limit)]


@router.get("/learn-more", response_model=List[LearnMoreResponse])
def list_learn_more(category: Optional[str] = None, db: Session = Depends(get_db)):
    return [LearnMoreResponse.model_validate(article) for article in content_service.list_learn_more(db, category)]
