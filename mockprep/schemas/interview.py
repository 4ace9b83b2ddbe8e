"""
Pydantic schemas for interview and question endpoints.
"""
from typing import Optional, List
from datetime import datetime
from pydantic import Field, model_validator

from mockprep.core.config import DEFAULT_QUESTION_COUNT, MAX_QUESTION_COUNT
from mockprep.db.models.enums import JobRole, ExperienceLevel, InterviewStatus, QuestionType
from mockprep.schemas.base import CamelModel
from mockprep.services.question_service import ResponseEvaluation


class InterviewCreate(CamelModel):
    """Schema for creating a new interview."""
    title: str = Field(..., min_length=1, max_length=255, description="Interview title")
    job_role: JobRole = Field(..., description="Job role the interview targets")
    experience_level: ExperienceLevel = Field(..., description="Candidate experience level")
    tech_stack: List[str] = Field(default_factory=list, description="Technologies to cover, in order")
    voice_enabled: bool = Field(False, description="Allocate a realtime voice room")
    question_count: int = Field(
        DEFAULT_QUESTION_COUNT, ge=1, le=MAX_QUESTION_COUNT, description="Number of questions to generate"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Backend practice",
                "jobRole": "backend_developer",
                "experienceLevel": "mid",
                "techStack": ["Go", "PostgreSQL"],
                "voiceEnabled": False,
                "questionCount": 8
            }
        }


class InterviewUpdate(CamelModel):
    """Schema for a partial interview update. Scores are not updatable."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[InterviewStatus] = None
    current_question: Optional[int] = Field(None, ge=0)
    total_questions: Optional[int] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0, description="Duration in minutes")

    class Config:
        extra = "forbid"

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        # Omitted fields stay untouched, explicit nulls are rejected.
        nulls = [name for name in self.model_fields_set if getattr(self, name) is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(sorted(nulls))}")
        return self


class InterviewQuestionResponse(CamelModel):
    """Schema for a single interview question."""
    id: str
    interview_id: str
    question_text: str
    question_type: QuestionType
    order_index: int
    user_response: Optional[str] = None
    response_transcript: Optional[str] = None
    response_score: Optional[float] = None
    response_feedback: Optional[str] = None
    time_spent: Optional[int] = Field(None, description="Seconds spent answering")
    created_at: Optional[datetime] = None


class InterviewResponse(CamelModel):
    """Schema for an interview without its questions."""
    id: str
    user_id: str
    title: str
    job_role: JobRole
    experience_level: ExperienceLevel
    tech_stack: List[str] = Field(default_factory=list)
    status: InterviewStatus
    duration: Optional[int] = Field(None, description="Duration in minutes")
    total_questions: int = 0
    current_question: int = 0
    overall_score: Optional[float] = None
    confidence_level: Optional[float] = None
    communication_score: Optional[float] = None
    technical_score: Optional[float] = None
    feedback: Optional[str] = None
    voice_enabled: bool = False
    room_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InterviewWithQuestionsResponse(InterviewResponse):
    """Schema for an interview together with its ordered questions."""
    questions: List[InterviewQuestionResponse] = Field(default_factory=list)


class InterviewCompleteRequest(CamelModel):
    duration: Optional[int] = Field(None, ge=1, description="Duration override in minutes")


class ResponseSubmit(CamelModel):
    """Schema for submitting an answer to a question."""
    response: Optional[str] = Field(None, description="Answer text (required, checked by the service)")
    transcript: Optional[str] = Field(None, description="Raw voice transcript")
    time_spent: Optional[int] = Field(None, ge=0, description="Seconds spent answering")


class ResponseSubmitResult(CamelModel):
    question: InterviewQuestionResponse
    evaluation: ResponseEvaluation


class SessionTokenResponse(CamelModel):
    token: str
    ws_url: str
    room_name: str


class DeleteResponse(CamelModel):
    success: bool
