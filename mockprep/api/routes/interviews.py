"""
Interview endpoints.

Create, read, update and delete interviews, finish them, and hand out voice
room tokens. Another user's interview is always reported as 404.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, status

from mockprep.core.auth_dependency import get_current_user_obj, get_lifecycle
from mockprep.core.errors import to_http_exception
from mockprep.db.models.user import User
from mockprep.schemas.interview import (
    InterviewCreate,
    InterviewUpdate,
    InterviewResponse,
    InterviewWithQuestionsResponse,
    InterviewCompleteRequest,
    SessionTokenResponse,
    DeleteResponse,
)
from mockprep.services.interview_lifecycle import InterviewLifecycle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interviews", tags=["Interviews"])


@router.get("", response_model=List[InterviewResponse])
def list_interviews(
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    """List the caller's interviews, newest first."""
    try:
        return lifecycle.list_interviews(user.id)
    except Exception as e:
        raise to_http_exception(e, "Failed to fetch interviews")


@router.post("", status_code=status.HTTP_200_OK, response_model=InterviewWithQuestionsResponse)
def create_interview(
    data: InterviewCreate,
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    """
    Create an interview and generate its questions.

    If question generation fails the interview stays saved as pending
    with no questions, and the request fails with 500.
    """
    try:
        return lifecycle.create_interview(
            user_id=user.id,
            title=data.title,
            job_role=data.job_role,
            experience_level=data.experience_level,
            tech_stack=data.tech_stack,
            voice_enabled=data.voice_enabled,
            question_count=data.question_count,
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to create interview")


@router.get("/{interview_id}", response_model=InterviewWithQuestionsResponse)
def get_interview(
    interview_id: str,
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    try:
        return lifecycle.get_owned_interview(interview_id, user.id, with_questions=True)
    except Exception as e:
        raise to_http_exception(e, "Failed to fetch interview")


@router.patch("/{interview_id}", response_model=InterviewResponse)
def update_interview(
    interview_id: str,
    data: InterviewUpdate,
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    """Update setup or progress fields. Status changes must follow the interview lifecycle."""
    try:
        interview = lifecycle.get_owned_interview(interview_id, user.id)
        return lifecycle.update_interview(interview, data.model_dump(exclude_unset=True))
    except Exception as e:
        raise to_http_exception(e, "Failed to update interview")


@router.delete("/{interview_id}", response_model=DeleteResponse)
def delete_interview(
    interview_id: str,
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    """Delete an interview with its questions, closing its voice room first."""
    try:
        interview = lifecycle.get_owned_interview(interview_id, user.id)
        return DeleteResponse(success=lifecycle.delete_interview(interview))
    except Exception as e:
        raise to_http_exception(e, "Failed to delete interview")


@router.post("/{interview_id}/token", response_model=SessionTokenResponse)
def create_session_token(
    interview_id: str,
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    """Issue a join token for the interview's voice room."""
    try:
        interview = lifecycle.get_owned_interview(interview_id, user.id)
        return lifecycle.issue_session_token(interview, user)
    except Exception as e:
        raise to_http_exception(e, "Failed to generate access token")


@router.get("/{interview_id}/room")
def get_room_info(
    interview_id: str,
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
) -> Optional[Dict[str, Any]]:
    """Room details from the realtime provider, or null when unavailable."""
    try:
        interview = lifecycle.get_owned_interview(interview_id, user.id)
        return lifecycle.get_room_info(interview)
    except Exception as e:
        raise to_http_exception(e, "Failed to fetch room info")


@router.post("/{interview_id}/complete", response_model=InterviewResponse)
def complete_interview(
    interview_id: str,
    data: Optional[InterviewCompleteRequest] = Body(None),
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    """Score the interview, generate the overall feedback and mark it completed."""
    try:
        lifecycle.get_owned_interview(interview_id, user.id)
        duration = data.duration if data else None
        return lifecycle.complete_interview(interview_id, duration=duration)
    except Exception as e:
        raise to_http_exception(e, "Failed to complete interview")


@router.post("/{interview_id}/cancel", response_model=InterviewResponse)
def cancel_interview(
    interview_id: str,
    user: User = Depends(get_current_user_obj),
    lifecycle: InterviewLifecycle = Depends(get_lifecycle)
):
    try:
        interview = lifecycle.get_owned_interview(interview_id, user.id)
        return lifecycle.cancel_interview(interview)
    except Exception as e:
        raise to_http_exception(e, "Failed to cancel interview")
