"""
Request dependencies: database session, collaborators and the current user.

Authentication is a pluggable boundary. get_current_claims verifies the
identity provider's token; deployments or tests with another provider
override it (or get_current_user_obj) through app.dependency_overrides.
"""
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from mockprep.core import config
from mockprep.core.security import decode_identity_token, profile_from_claims
from mockprep.db.models.user import User
from mockprep.services.interview_lifecycle import InterviewLifecycle
from mockprep.services.storage import InterviewStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_db(request: Request):
    """Database session dependency."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> InterviewStore:
    return InterviewStore(db)


def get_lifecycle(request: Request, store: InterviewStore = Depends(get_store)) -> InterviewLifecycle:
    return InterviewLifecycle(
        store=store,
        generator=request.app.state.generator,
        sessions=request.app.state.sessions,
    )


def get_current_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """Get identity claims from the bearer token, or from the session cookie."""
    token = credentials.credentials if credentials else request.cookies.get(config.SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return decode_identity_token(token)


def get_current_user_obj(
    claims: Dict[str, Any] = Depends(get_current_claims),
    store: InterviewStore = Depends(get_store),
) -> User:
    """Get the current User, synchronizing the profile from the identity provider."""
    return store.upsert_user(claims["sub"], **profile_from_claims(claims))
