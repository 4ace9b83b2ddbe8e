from fastapi import APIRouter, Depends

from mockprep.core.auth_dependency import get_current_user_obj, get_store
from mockprep.core.errors import to_http_exception
from mockprep.db.models.user import User
from mockprep.schemas.user import UserResponse
from mockprep.services.storage import InterviewStore

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.get("/user", response_model=UserResponse)
def get_user(
    user: User = Depends(get_current_user_obj),
    store: InterviewStore = Depends(get_store)
):
    """Current user profile with saved preferences."""
    try:
        return store.get_user_with_preferences(user.id)
    except Exception as e:
        raise to_http_exception(e, "Failed to fetch user")
