"""
Interview model: one practice session with its aggregate scores.
"""
import uuid

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, Boolean, Numeric, JSON, Enum, Index
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mockprep.db.base import Base
from mockprep.db.models.enums import JobRole, ExperienceLevel, InterviewStatus, enum_values


class Interview(Base):
    """
    Interview model.

    Scores and feedback stay NULL until the interview is completed.
    room_name is set only for voice-enabled interviews whose room was allocated.
    """
    __tablename__ = "interviews"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Setup
    title = Column(String, nullable=False)
    job_role = Column(Enum(JobRole, name="job_role", values_callable=enum_values), nullable=False)
    experience_level = Column(
        Enum(ExperienceLevel, name="experience_level", values_callable=enum_values), nullable=False
    )
    tech_stack = Column(JSON, nullable=False, default=list)
    voice_enabled = Column(Boolean, nullable=False, default=False)
    room_name = Column(String, nullable=True)  # realtime room identifier

    # Progress
    status = Column(
        Enum(InterviewStatus, name="interview_status", values_callable=enum_values),
        nullable=False,
        default=InterviewStatus.PENDING,
    )
    duration = Column(Integer, nullable=True)  # in minutes
    total_questions = Column(Integer, nullable=False, default=0)
    current_question = Column(Integer, nullable=False, default=0)

    # Results
    overall_score = Column(Numeric(5, 2), nullable=True)
    confidence_level = Column(Numeric(5, 2), nullable=True)
    communication_score = Column(Numeric(5, 2), nullable=True)
    technical_score = Column(Numeric(5, 2), nullable=True)
    feedback = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    user = relationship("User", back_populates="interviews")
    questions = relationship(
        "InterviewQuestion",
        back_populates="interview",
        order_by="InterviewQuestion.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_interviews_user_status", "user_id", "status"),
    )

    def __repr__(self):
        return f"<Interview(id='{self.id}', title='{self.title}', status='{self.status}')>"
