"""
Storage service: CRUD and aggregate queries over users, interviews,
questions and preferences.

Every public method commits on its own. Multi-step workflows built on top of
the store are therefore not atomic; a failure half-way leaves the earlier
writes in place.
"""
import functools
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from mockprep.core.errors import PersistenceError
from mockprep.db.models.enums import InterviewStatus, QuestionType
from mockprep.db.models.interview import Interview
from mockprep.db.models.interview_question import InterviewQuestion
from mockprep.db.models.user import User
from mockprep.db.models.user_preferences import UserPreferences
from mockprep.services.scoring import UserStats, compute_user_stats

logger = logging.getLogger(__name__)

INTERVIEW_UPDATABLE_FIELDS = {
    "title",
    "status",
    "duration",
    "total_questions",
    "current_question",
    "voice_enabled",
    "room_name",
    "overall_score",
    "confidence_level",
    "communication_score",
    "technical_score",
    "feedback",
}

USER_PROFILE_FIELDS = ("email", "first_name", "last_name", "profile_image_url")

PREFERENCE_FIELDS = (
    "preferred_job_role",
    "preferred_experience_level",
    "preferred_tech_stack",
    "voice_enabled_by_default",
    "dark_mode",
)


def _persistence_guard(method):
    """Roll back and re-raise database failures as PersistenceError."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Store operation {method.__name__} failed: {e}", exc_info=True)
            raise PersistenceError(f"{method.__name__} failed") from e

    return wrapper


class InterviewStore:
    """Repository bound to one database session (one request)."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    @_persistence_guard
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    @_persistence_guard
    def upsert_user(self, user_id: str, **profile: Any) -> User:
        """Create or refresh the profile synchronized from the identity provider."""
        user = self.db.get(User, user_id)
        if user is None:
            user = User(id=user_id)
            self.db.add(user)

        for field in USER_PROFILE_FIELDS:
            if field in profile and profile[field] is not None:
                setattr(user, field, profile[field])

        self.db.commit()
        self.db.refresh(user)
        return user

    @_persistence_guard
    def get_user_with_preferences(self, user_id: str) -> Optional[User]:
        return (
            self.db.query(User)
            .options(selectinload(User.preferences))
            .filter(User.id == user_id)
            .first()
        )

    # ------------------------------------------------------------------
    # Interviews
    # ------------------------------------------------------------------

    @_persistence_guard
    def create_interview(
        self,
        user_id: str,
        title: str,
        job_role,
        experience_level,
        tech_stack: Optional[List[str]] = None,
        voice_enabled: bool = False,
    ) -> Interview:
        interview = Interview(
            user_id=user_id,
            title=title,
            job_role=job_role,
            experience_level=experience_level,
            tech_stack=list(tech_stack or []),
            voice_enabled=voice_enabled,
            status=InterviewStatus.PENDING,
            total_questions=0,
            current_question=0,
        )
        self.db.add(interview)
        self.db.commit()
        self.db.refresh(interview)
        logger.info(f"Interview created: interview_id={interview.id}, user_id={user_id}")
        return interview

    @_persistence_guard
    def get_interview(self, interview_id: str) -> Optional[Interview]:
        return self.db.get(Interview, interview_id)

    @_persistence_guard
    def get_interview_with_questions(self, interview_id: str) -> Optional[Interview]:
        return (
            self.db.query(Interview)
            .options(selectinload(Interview.questions))
            .filter(Interview.id == interview_id)
            .first()
        )

    @_persistence_guard
    def get_user_interviews(self, user_id: str) -> List[Interview]:
        return (
            self.db.query(Interview)
            .filter(Interview.user_id == user_id)
            .order_by(desc(Interview.created_at))
            .all()
        )

    @_persistence_guard
    def update_interview(self, interview_id: str, updates: Dict[str, Any]) -> Optional[Interview]:
        interview = self.db.get(Interview, interview_id)
        if interview is None:
            return None

        unknown = set(updates) - INTERVIEW_UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update interview fields: {', '.join(sorted(unknown))}")

        for field, value in updates.items():
            setattr(interview, field, value)

        self.db.commit()
        self.db.refresh(interview)
        return interview

    @_persistence_guard
    def delete_interview(self, interview_id: str) -> bool:
        interview = self.db.get(Interview, interview_id)
        if interview is None:
            return False

        self.db.delete(interview)
        self.db.commit()
        logger.info(f"Interview deleted: interview_id={interview_id}")
        return True

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    @_persistence_guard
    def add_question_to_interview(
        self,
        interview_id: str,
        question_text: str,
        question_type: QuestionType,
        order_index: int,
    ) -> InterviewQuestion:
        question = InterviewQuestion(
            interview_id=interview_id,
            question_text=question_text,
            question_type=question_type,
            order_index=order_index,
        )
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)
        return question

    @_persistence_guard
    def get_question(self, question_id: str) -> Optional[InterviewQuestion]:
        return self.db.get(InterviewQuestion, question_id)

    @_persistence_guard
    def update_question_response(
        self,
        question_id: str,
        response: str,
        transcript: Optional[str] = None,
        score: Optional[float] = None,
        feedback: Optional[str] = None,
        time_spent: Optional[int] = None,
        reset_evaluation: bool = False,
    ) -> Optional[InterviewQuestion]:
        """
        Record an answer on a question.

        The response text always overwrites. Transcript and feedback overwrite
        only when non-empty; score and time spent only when not None.
        reset_evaluation clears a previous score and feedback so they never
        sit next to an answer they were not computed for.
        """
        question = self.db.get(InterviewQuestion, question_id)
        if question is None:
            return None

        question.user_response = response
        if reset_evaluation:
            question.response_score = None
            question.response_feedback = None
        if transcript:
            question.response_transcript = transcript
        if score is not None:
            question.response_score = score
        if feedback:
            question.response_feedback = feedback
        if time_spent is not None:
            question.time_spent = time_spent

        self.db.commit()
        self.db.refresh(question)
        return question

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    @_persistence_guard
    def get_user_preferences(self, user_id: str) -> Optional[UserPreferences]:
        return self.db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()

    @_persistence_guard
    def upsert_user_preferences(self, user_id: str, preferences: Dict[str, Any]) -> UserPreferences:
        row = self.db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()
        if row is None:
            row = UserPreferences(user_id=user_id)
            self.db.add(row)

        for field in PREFERENCE_FIELDS:
            if field in preferences:
                setattr(row, field, preferences[field])

        self.db.commit()
        self.db.refresh(row)
        return row

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    @_persistence_guard
    def get_user_stats(self, user_id: str) -> UserStats:
        completed = (
            self.db.query(Interview)
            .filter(
                Interview.user_id == user_id,
                Interview.status == InterviewStatus.COMPLETED,
            )
            .all()
        )
        return compute_user_stats(completed)
