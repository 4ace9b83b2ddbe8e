import logging
from typing import Any, Dict

from fastapi import HTTPException, status
from jose import jwt, JWTError

from mockprep.core import config

logger = logging.getLogger(__name__)


def decode_identity_token(token: str) -> Dict[str, Any]:
    """
    Verify a session token issued by the identity provider.
    
    Args:
        token: Encoded JWT from the Authorization header or the session cookie
        
    Returns:
        The token claims; "sub" is the user id
        
    Raises:
        HTTPException: 401 if the token is invalid, expired or has no subject
    """
    if not config.IDENTITY_JWT_SECRET:
        logger.error("IDENTITY_JWT_SECRET not configured - cannot verify session tokens")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    options = {"verify_aud": bool(config.IDENTITY_JWT_AUDIENCE)}
    try:
        claims = jwt.decode(
            token,
            config.IDENTITY_JWT_SECRET,
            algorithms=[config.IDENTITY_JWT_ALGORITHM],
            audience=config.IDENTITY_JWT_AUDIENCE,
            options=options,
        )
    except JWTError as e:
        logger.debug(f"Rejected session token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if not claims.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return claims


def profile_from_claims(claims: Dict[str, Any]) -> Dict[str, Any]:
    """Map identity-provider claims onto User profile columns."""
    return {
        "email": claims.get("email"),
        "first_name": claims.get("first_name") or claims.get("given_name"),
        "last_name": claims.get("last_name") or claims.get("family_name"),
        "profile_image_url": claims.get("profile_image_url") or claims.get("picture"),
    }
