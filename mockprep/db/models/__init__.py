"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from mockprep.db.models.enums import JobRole, ExperienceLevel, InterviewStatus, QuestionType
from mockprep.db.models.user import User
from mockprep.db.models.interview import Interview
from mockprep.db.models.interview_question import InterviewQuestion
from mockprep.db.models.user_preferences import UserPreferences

__all__ = [
    "JobRole",
    "ExperienceLevel",
    "InterviewStatus",
    "QuestionType",
    "User",
    "Interview",
    "InterviewQuestion",
    "UserPreferences",
]
