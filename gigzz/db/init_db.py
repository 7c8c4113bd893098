import logging

from gigzz.db.session import engine
from gigzz.db.base import Base
import gigzz.db.models  # noqa: F401  (registers every table on Base.metadata)

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create any missing tables. Production schemas are managed by alembic."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
