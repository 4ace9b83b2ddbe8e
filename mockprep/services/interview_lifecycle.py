"""
Interview lifecycle: creation, answer submission, completion, cancellation
and deletion.

The controller owns no state of its own. It is built per request from the
request's store plus the process-wide collaborators held on app.state.

Status machine:
    pending -> in_progress   (first answer, or explicit update)
    pending | in_progress -> completed   (completion flow only)
    pending | in_progress -> cancelled   (explicit user action)
completed and cancelled are terminal; completing a completed interview again
recomputes and overwrites (last write wins).
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from mockprep.core.config import DEFAULT_QUESTION_COUNT, DEFAULT_DURATION_MINUTES
from mockprep.core.errors import (
    ValidationError,
    InvalidStateError,
    NotFoundError,
    GenerationError,
    EvaluationError,
    SessionProviderError,
)
from mockprep.db.models.enums import InterviewStatus, JobRole, ExperienceLevel
from mockprep.db.models.interview import Interview
from mockprep.db.models.interview_question import InterviewQuestion
from mockprep.db.models.user import User
from mockprep.services.question_service import QuestionEvaluationService, ResponseEvaluation
from mockprep.services.realtime_service import RealtimeSessionService
from mockprep.services.scoring import (
    INSUFFICIENT_DATA_FEEDBACK,
    UserStats,
    compute_interview_scores,
)
from mockprep.services.storage import InterviewStore

logger = logging.getLogger(__name__)

# Transitions reachable through a plain update. completed is set by complete_interview only.
UPDATE_TRANSITIONS = {
    InterviewStatus.PENDING: {InterviewStatus.IN_PROGRESS, InterviewStatus.CANCELLED},
    InterviewStatus.IN_PROGRESS: {InterviewStatus.CANCELLED},
    InterviewStatus.COMPLETED: set(),
    InterviewStatus.CANCELLED: set(),
}

# voice_enabled is fixed at creation: room_name is only allocated then.
PATCHABLE_FIELDS = {"title", "status", "current_question", "total_questions", "duration"}


def _score(value: float) -> float:
    return round(value, 2)


class InterviewLifecycle:
    """Orchestrates the store and the two external collaborators."""

    def __init__(
        self,
        store: InterviewStore,
        generator: QuestionEvaluationService,
        sessions: RealtimeSessionService,
    ):
        self.store = store
        self.generator = generator
        self.sessions = sessions

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_owned_interview(self, interview_id: str, user_id: str, with_questions: bool = False) -> Interview:
        """Resolve an interview for its owner. Someone else's interview is reported as not found."""
        if with_questions:
            interview = self.store.get_interview_with_questions(interview_id)
        else:
            interview = self.store.get_interview(interview_id)

        if interview is None or interview.user_id != user_id:
            raise NotFoundError("Interview not found")
        return interview

    def list_interviews(self, user_id: str) -> List[Interview]:
        return self.store.get_user_interviews(user_id)

    def get_user_stats(self, user_id: str) -> UserStats:
        return self.store.get_user_stats(user_id)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_interview(
        self,
        user_id: str,
        title: str,
        job_role: JobRole,
        experience_level: ExperienceLevel,
        tech_stack: Optional[List[str]] = None,
        voice_enabled: bool = False,
        question_count: int = DEFAULT_QUESTION_COUNT,
    ) -> Interview:
        """
        Create an interview, generate and store its questions, and allocate a
        voice room when requested.

        The interview row is written first and is not rolled back: if question
        generation fails, GenerationError propagates and the interview stays
        pending with no questions. A failed room allocation only leaves
        room_name empty.
        """
        interview = self.store.create_interview(
            user_id=user_id,
            title=title,
            job_role=job_role,
            experience_level=experience_level,
            tech_stack=tech_stack,
            voice_enabled=voice_enabled,
        )

        try:
            generated = self.generator.generate_questions(
                job_role, experience_level, list(tech_stack or []), question_count
            )
        except GenerationError:
            logger.warning(f"Question generation failed, interview left pending: interview_id={interview.id}")
            raise
        except Exception as e:
            logger.warning(f"Question generation failed, interview left pending: interview_id={interview.id}")
            raise GenerationError("Failed to generate interview questions") from e

        if not generated:
            raise GenerationError("Generator returned no questions")

        for index, item in enumerate(generated):
            self.store.add_question_to_interview(
                interview_id=interview.id,
                question_text=item.question,
                question_type=item.type,
                order_index=index,
            )
        self.store.update_interview(interview.id, {"total_questions": len(generated)})

        if voice_enabled:
            try:
                room_name = self.sessions.allocate_room(interview.id)
                self.store.update_interview(interview.id, {"room_name": room_name})
            except SessionProviderError as e:
                logger.warning(f"Voice room unavailable, continuing without it: interview_id={interview.id}: {e}")

        logger.info(
            f"Interview ready: interview_id={interview.id}, questions={len(generated)}, "
            f"voice_enabled={voice_enabled}"
        )
        return self.store.get_interview_with_questions(interview.id)

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------

    def submit_response(
        self,
        question_id: str,
        user_id: str,
        response: str,
        transcript: Optional[str] = None,
        time_spent: Optional[int] = None,
    ) -> Tuple[InterviewQuestion, ResponseEvaluation]:
        """
        Store an answer, then evaluate it.

        The raw answer is committed before evaluation so it survives an
        evaluation failure; in that case score and feedback stay empty and
        EvaluationError propagates.
        """
        if response is None or not response.strip():
            raise ValidationError("Response is required")

        question = self.store.get_question(question_id)
        if question is None:
            raise NotFoundError("Question not found")

        interview = self.store.get_interview(question.interview_id)
        if interview is None or interview.user_id != user_id:
            raise NotFoundError("Interview not found")

        if interview.status == InterviewStatus.CANCELLED:
            raise InvalidStateError("Interview has been cancelled")

        self.store.update_question_response(
            question_id,
            response,
            transcript=transcript,
            time_spent=time_spent,
            reset_evaluation=True,
        )
        self._mark_progress(interview, question)

        try:
            evaluation = self.generator.evaluate_response(
                question=question.question_text,
                response=response,
                job_role=interview.job_role,
                experience_level=interview.experience_level,
            )
        except EvaluationError:
            logger.warning(f"Evaluation failed, raw response kept: question_id={question_id}")
            raise
        except Exception as e:
            logger.warning(f"Evaluation failed, raw response kept: question_id={question_id}")
            raise EvaluationError("Failed to evaluate response") from e

        updated = self.store.update_question_response(
            question_id,
            response,
            transcript=transcript,
            score=_score(evaluation.score),
            feedback=evaluation.feedback,
            time_spent=time_spent,
        )
        logger.info(f"Response evaluated: question_id={question_id}, score={evaluation.score}")
        return updated, evaluation

    def _mark_progress(self, interview: Interview, question: InterviewQuestion) -> None:
        """First answer moves a pending interview to in_progress and advances the counter."""
        updates: Dict[str, Any] = {}
        if interview.status == InterviewStatus.PENDING:
            updates["status"] = InterviewStatus.IN_PROGRESS
        if question.order_index + 1 > (interview.current_question or 0):
            updates["current_question"] = question.order_index + 1
        if updates:
            self.store.update_interview(interview.id, updates)

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def complete_interview(self, interview_id: str, duration: Optional[int] = None) -> Interview:
        """
        Aggregate question scores, generate the narrative summary and mark the
        interview completed. The voice room, if any, is torn down afterwards.

        Summary generation errors propagate and nothing is written.
        """
        interview = self.store.get_interview_with_questions(interview_id)
        if interview is None:
            raise NotFoundError("Interview not found")

        if interview.status == InterviewStatus.CANCELLED:
            raise InvalidStateError("Cannot complete a cancelled interview")

        scores = compute_interview_scores(interview.questions)

        if scores.has_data:
            try:
                feedback = self.generator.summarize(scores.scored)
            except GenerationError:
                raise
            except Exception as e:
                raise GenerationError("Failed to generate overall feedback") from e
        else:
            feedback = INSUFFICIENT_DATA_FEEDBACK

        completed = self.store.update_interview(interview_id, {
            "status": InterviewStatus.COMPLETED,
            "overall_score": _score(scores.overall_score),
            "communication_score": _score(scores.communication_score),
            "technical_score": _score(scores.technical_score),
            "confidence_level": _score(scores.confidence_level),
            "feedback": feedback,
            "duration": duration or DEFAULT_DURATION_MINUTES,
        })
        logger.info(
            f"Interview completed: interview_id={interview_id}, scored={len(scores.scored)}, "
            f"overall={scores.overall_score:.2f}"
        )

        if interview.room_name:
            self._teardown(interview.room_name)

        return completed

    # ------------------------------------------------------------------
    # Cancellation, updates, deletion
    # ------------------------------------------------------------------

    def cancel_interview(self, interview: Interview) -> Interview:
        if interview.status == InterviewStatus.CANCELLED:
            return interview
        if interview.status == InterviewStatus.COMPLETED:
            raise InvalidStateError("Cannot cancel a completed interview")

        cancelled = self.store.update_interview(interview.id, {"status": InterviewStatus.CANCELLED})
        logger.info(f"Interview cancelled: interview_id={interview.id}")

        if interview.room_name:
            self._teardown(interview.room_name)
        return cancelled

    def update_interview(self, interview: Interview, changes: Dict[str, Any]) -> Interview:
        """
        Apply a partial update. Only setup and progress fields can change;
        scores and feedback are owned by the completion flow.
        """
        unknown = set(changes) - PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
        nulls = [field for field, value in changes.items() if value is None]
        if nulls:
            raise ValidationError(f"Fields cannot be null: {', '.join(sorted(nulls))}")

        updates = dict(changes)
        target = updates.get("status")
        if target is not None:
            target = InterviewStatus(target)
            if target == interview.status:
                updates.pop("status")
            elif target == InterviewStatus.CANCELLED:
                updates.pop("status")
                interview = self.cancel_interview(interview)
            elif target not in UPDATE_TRANSITIONS[InterviewStatus(interview.status)]:
                raise InvalidStateError(
                    f"Cannot change status from {InterviewStatus(interview.status).value} to {target.value}"
                )
            else:
                updates["status"] = target

        if not updates:
            return interview
        return self.store.update_interview(interview.id, updates)

    def delete_interview(self, interview: Interview) -> bool:
        if interview.room_name:
            self._teardown(interview.room_name)
        return self.store.delete_interview(interview.id)

    # ------------------------------------------------------------------
    # Voice sessions
    # ------------------------------------------------------------------

    def issue_session_token(self, interview: Interview, user: User) -> Dict[str, str]:
        if not interview.room_name:
            raise ValidationError("Interview does not have voice enabled")

        participant_name = user.first_name or user.email or f"User-{user.id}"
        token = self.sessions.issue_token(interview.room_name, participant_name, user.id)
        return {
            "token": token,
            "ws_url": self.sessions.ws_url,
            "room_name": interview.room_name,
        }

    def get_room_info(self, interview: Interview) -> Optional[Dict[str, Any]]:
        if not interview.room_name:
            return None
        return self.sessions.get_room_info(interview.room_name)

    def _teardown(self, room_name: str) -> None:
        try:
            self.sessions.teardown_room(room_name)
        except Exception as e:
            logger.warning(f"Room teardown failed for {room_name}: {e}", exc_info=True)
