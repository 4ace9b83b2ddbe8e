"""
Liveness and dependency status for deployment monitoring.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from mockprep.core import config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])

API_VERSION = "1.0.0"


def _database_status(request: Request) -> str:
    try:
        with request.app.state.session_factory() as db:
            db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the database: {e}")
        return "unreachable"
    return "connected"


@router.get("")
def health_check(request: Request):
    """
    Always 200. status is "degraded" when the database does not answer.

    Collaborator entries only report whether credentials are configured;
    the external services themselves are not called.
    """
    database = _database_status(request)
    return {
        "status": "healthy" if database == "connected" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "database": database,
        "generator": "configured" if config.OPENAI_API_KEY else "missing_api_key",
        "voice_rooms": "configured" if config.LIVEKIT_API_KEY and config.LIVEKIT_API_SECRET else "missing_credentials",
    }
