import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Numeric, Enum, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from mockprep.db.base import Base
from mockprep.db.models.enums import QuestionType, enum_values


class InterviewQuestion(Base):
    """
    One prompt within an interview.

    order_index is zero-based and unique per interview; it drives presentation
    and aggregation order. Score and feedback are written only after evaluation.
    """
    __tablename__ = "interview_questions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    interview_id = Column(
        String(36), ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_text = Column(Text, nullable=False)
    question_type = Column(
        Enum(QuestionType, name="question_type", values_callable=enum_values),
        nullable=False,
    )
    order_index = Column(Integer, nullable=False)

    user_response = Column(Text, nullable=True)
    response_transcript = Column(Text, nullable=True)
    response_score = Column(Numeric(4, 2), nullable=True)  # 0-10
    response_feedback = Column(Text, nullable=True)
    time_spent = Column(Integer, nullable=True)  # in seconds

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    interview = relationship("Interview", back_populates="questions")

    __table_args__ = (
        UniqueConstraint("interview_id", "order_index", name="uq_interview_question_order"),
    )

    def __repr__(self):
        return f"<InterviewQuestion(id='{self.id}', order_index={self.order_index}, type='{self.question_type}')>"
