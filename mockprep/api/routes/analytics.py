import logging

from fastapi import APIRouter, Depends

from mockprep.core.auth_dependency import get_current_user_obj, get_lifecycle
from mockprep.core.errors import to_http_exception
from mockprep.db.models.user import User
from mockprep.schemas.analytics import UserStatsResponse
from mockprep.services.interview_lifecycle import InterviewLifecycle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


@router.get("/stats", response_model=UserStatsResponse)
def get_stats(
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    """Totals and averages over the caller's completed interviews."""
    try:
        return lifecycle.get_user_stats(user.id)
    except Exception as e:
        raise to_http_exception(e, "Failed to fetch stats")
