"""
News posts and learn-more articles.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from gigzz.core.errors import ValidationFailedError
from gigzz.db.models.content import LearnMore, News
from gigzz.db.models.user import User

logger = logging.getLogger(__name__)


def _require_text(value: Optional[str], field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationFailedError(f"{field} is required")
    return value


def create_news(db: Session, author: User, title: str, body: str, image_url: Optional[str] = None) -> News:
    news = News(
        title=_require_text(title, "Title"),
        body=_require_text(body, "Body"),
        image_url=image_url,
        author_id=author.id,
    )
    db.add(news)
    db.commit()
    db.refresh(news)
    logger.info(f"News posted: news_id={news.id}, author_id={author.id}")
    return news


def list_news(db: Session, limit: int = 20) -> List[News]:
    return db.query(News).order_by(News.created_at.desc(), News.id.desc()).limit(limit).all()


def create_learn_more(db: Session, author: User, title: str, body: str, category: Optional[str] = None) -> LearnMore:
    article = LearnMore(
        title=_require_text(title, "Title"),
        body=_require_text(body, "Body"),
        category=(category or "").strip() or None,
        author_id=author.id,
    )
    db.add(article)
    db.commit()
    db.refresh(article)
    logger.info(f"Learn-more article posted: article_id={article.id}, author_id={author.id}")
    return article


def list_learn_more(db: Session, category: Optional[str] = None) -> List[LearnMore]:
    query = db.query(LearnMore)
    if category:
        query = query.filter(LearnMore.category == category)
    return query.order_by(LearnMore.created_at.desc(), LearnMore.id.desc()).all()
