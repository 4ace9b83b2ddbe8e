from typing import Optional
from datetime import datetime

from mockprep.schemas.base import CamelModel
from mockprep.schemas.preferences import PreferencesResponse


class UserResponse(CamelModel):
    """Current user as synchronized from the identity provider."""
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    preferences: Optional[PreferencesResponse] = None
