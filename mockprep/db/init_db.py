import logging

from sqlalchemy.engine import Engine

from mockprep.db.base import Base
import mockprep.db.models  # noqa: F401  (registers every table on Base.metadata)

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database tables ready: {', '.join(sorted(Base.metadata.tables))}")
