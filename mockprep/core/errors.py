"""
Domain exceptions and their HTTP mapping.

Validation and not-found errors surface their own short message with a 4xx.
Everything else becomes a generic 500; the detail goes to the log only.
"""
import logging

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


class MockPrepError(Exception):
    """Base class for all domain errors."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MockPrepError):
    """Missing or invalid input (e.g. a blank response)."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class InvalidStateError(ValidationError):
    """Requested status transition is not allowed from the current status."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Invalid interview state"


class NotFoundError(MockPrepError):
    """Entity cannot be resolved, or belongs to someone else."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class GenerationError(MockPrepError):
    """Question or summary generation failed."""
    default_message = "Failed to generate interview content"


class EvaluationError(MockPrepError):
    """Per-response evaluation failed."""
    default_message = "Failed to evaluate response"


class SessionProviderError(MockPrepError):
    """Realtime room allocation or token issuing failed."""
    default_message = "Realtime session provider error"


class PersistenceError(MockPrepError):
    """Store failure. Always fatal to the request."""
    default_message = "Database error"


def to_http_exception(exc: Exception, failure_message: str) -> HTTPException:
    """
    Map any exception raised inside a route to the HTTPException to raise.

    Args:
        exc: The caught exception
        failure_message: Generic message used for every 5xx (e.g. "Failed to fetch interview")

    Returns:
        HTTPException carrying either the domain message (4xx) or the generic one (5xx)
    """
    if isinstance(exc, HTTPException):
        return exc

    if isinstance(exc, MockPrepError) and exc.status_code < 500:
        return HTTPException(status_code=exc.status_code, detail=exc.message)

    logger.error(f"{failure_message}: {type(exc).__name__}: {exc}", exc_info=exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=failure_message
    )
