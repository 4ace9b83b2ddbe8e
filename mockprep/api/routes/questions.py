"""
Question endpoints: answer submission and evaluation.
"""
import logging

from fastapi import APIRouter, Depends

from mockprep.core.auth_dependency import get_current_user_obj, get_lifecycle
from mockprep.core.errors import to_http_exception
from mockprep.db.models.user import User
from mockprep.schemas.interview import ResponseSubmit, ResponseSubmitResult, InterviewQuestionResponse
from mockprep.services.interview_lifecycle import InterviewLifecycle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/questions", tags=["Questions"])


@router.post("/{question_id}/response", response_model=ResponseSubmitResult)
def submit_response(
    question_id: str,
    data: ResponseSubmit,
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    """
    Save the answer, then evaluate it.
    
    The answer is stored before evaluation, so a failed evaluation (500)
    still keeps it; the client can resubmit to retry scoring.
    """
    try:
        question, evaluation = lifecycle.submit_response(
            question_id,
            user.id,
            data.response,
            transcript=data.transcript,
            time_spent=data.time_spent,
        )
        return ResponseSubmitResult(
            question=InterviewQuestionResponse.model_validate(question),
            evaluation=evaluation,
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to submit response")
