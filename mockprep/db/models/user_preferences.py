import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean, JSON, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mockprep.db.base import Base
from mockprep.db.models.enums import JobRole, ExperienceLevel, enum_values


class UserPreferences(Base):
    """Defaults used to pre-populate the interview setup form. One row per user."""
    __tablename__ = "user_preferences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    preferred_job_role = Column(
        Enum(JobRole, name="job_role", values_callable=enum_values), nullable=True
    )
    preferred_experience_level = Column(
        Enum(ExperienceLevel, name="experience_level", values_callable=enum_values),
        nullable=True,
    )
    preferred_tech_stack = Column(JSON, nullable=True, default=list)
    voice_enabled_by_default = Column(Boolean, nullable=False, default=True)
    dark_mode = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="preferences")
