"""
User preference endpoints (setup-form defaults).
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from mockprep.core.auth_dependency import get_current_user_obj, get_store
from mockprep.core.errors import to_http_exception
from mockprep.db.models.user import User
from mockprep.schemas.preferences import PreferencesUpdate, PreferencesResponse
from mockprep.services.storage import InterviewStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/preferences", tags=["Preferences"])


@router.get("", response_model=Optional[PreferencesResponse])
def get_preferences(
    user: User = Depends(get_current_user_obj),
    store: InterviewStore = Depends(get_store)
):
    """Return the caller's preferences, or null if none were saved yet."""
    try:
        return store.get_user_preferences(user.id)
    except Exception as e:
        raise to_http_exception(e, "Failed to fetch preferences")


@router.post("", response_model=PreferencesResponse)
def save_preferences(
    data: PreferencesUpdate,
    user: User = Depends(get_current_user_obj),
    store: InterviewStore = Depends(get_store)
):
    try:
        preferences = store.upsert_user_preferences(user.id, data.model_dump(exclude_unset=True))
        logger.info(f"Preferences saved: user_id={user.id}")
        return preferences
    except Exception as e:
        raise to_http_exception(e, "Failed to update preferences")
