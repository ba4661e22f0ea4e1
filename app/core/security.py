# app/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings
from app.core.session import AuthSession, session_registry
from app.schemas.session import Identity


# =====================================================================
# BEARER CONFIGURATION
# =====================================================================

security = HTTPBearer()


# =====================================================================
# TOKEN CREATION (auth provider compatible, used by tooling and tests)
# =====================================================================

def create_access_token(user_id: UUID, email: Optional[str] = None, expires_minutes: int = 60) -> str:
    """
    Create an access token in the auth provider's format.

    Args:
        user_id: Identity UUID, stored in ``sub``
        email: Optional email claim
        expires_minutes: Lifetime of the token

    Returns:
        Encoded JWT access token
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode = {
        "sub": str(user_id),
        "aud": settings.AUTH_JWT_AUDIENCE,
        "role": "authenticated",
        "exp": expire,
    }
    if email:
        to_encode["email"] = email
    return jwt.encode(
        to_encode,
        settings.AUTH_JWT_SECRET,
        algorithm=settings.AUTH_JWT_ALGORITHM,
    )


# =====================================================================
# TOKEN VERIFICATION
# =====================================================================

def verify_access_token(token: str) -> Identity:
    """
    Verify an auth provider access token and return the identity it carries.

    Args:
        token: JWT access token

    Returns:
        Identity with the user id and email claims

    Raises:
        HTTPException: If token is invalid or expired
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
        )
        subject: str = payload.get("sub")
        if subject is None:
            raise credentials_exception

        return Identity(user_id=UUID(subject), email=payload.get("email"))

    except (JWTError, ValueError):
        raise credentials_exception


# =====================================================================
# DEPENDENCIES
# =====================================================================

async def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Identity:
    """Get the authenticated identity from the bearer token."""
    return verify_access_token(credentials.credentials)


async def get_current_session(
    identity: Identity = Depends(get_current_identity),
) -> AuthSession:
    """Get the registered session for the authenticated identity."""
    session = session_registry.get(identity.user_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No active session",
        )
    return session
