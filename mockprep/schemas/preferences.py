"""
Pydantic schemas for user preference endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import Field

from mockprep.db.models.enums import JobRole, ExperienceLevel
from mockprep.schemas.base import CamelModel


class PreferencesUpdate(CamelModel):
    """Setup-form defaults. Omitted fields keep their stored value."""
    preferred_job_role: Optional[JobRole] = None
    preferred_experience_level: Optional[ExperienceLevel] = None
    preferred_tech_stack: Optional[List[str]] = None
    voice_enabled_by_default: Optional[bool] = None
    dark_mode: Optional[bool] = None


class PreferencesResponse(CamelModel):
    id: str
    user_id: str
    preferred_job_role: Optional[JobRole] = None
    preferred_experience_level: Optional[ExperienceLevel] = None
    preferred_tech_stack: List[str] = Field(default_factory=list)
    voice_enabled_by_default: bool = True
    dark_mode: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
