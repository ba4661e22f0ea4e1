# app/api/routers/session.py
from fastapi import APIRouter, Depends, status

from app.core.exceptions import NoTokenError
from app.core.security import get_current_identity, get_current_session
from app.core.session import AuthSession, session_registry
from app.schemas.session import (
    Identity,
    SessionCreate,
    ProviderTokenUpdate,
    SessionOut,
    SuccessResponse,
)

router = APIRouter(prefix="/auth", tags=["Session"])


# =====================================================================
# SESSION LIFECYCLE
# =====================================================================

@router.post(
    "/session",
    response_model=SessionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register the session after OAuth sign-in"
)
async def sign_in(
    session_data: SessionCreate,
    identity: Identity = Depends(get_current_identity),
):
    """
    Hand over the auth provider session after the GitHub OAuth sign-in.

    - **provider_token**: GitHub access token embedded in the session

    Publishes a sign-in event: the GitHub client is bound, the profile is
    created on first sign-in, and the last 30 days of commits are synced.
    The response reports whether GitHub is connected and the sync succeeded.
    """
    session = await session_registry.sign_in(
        identity.user_id, session_data.provider_token, email=identity.email
    )
    return SessionOut.model_validate(session)


@router.get(
    "/session",
    response_model=SessionOut,
    summary="Get the current session"
)
def get_session(session: AuthSession = Depends(get_current_session)):
    """Session state including GitHub connection and last sync outcome."""
    return SessionOut.model_validate(session)


@router.put(
    "/session/token",
    response_model=SessionOut,
    summary="Rotate the GitHub token"
)
async def rotate_token(
    token_data: ProviderTokenUpdate,
    session: AuthSession = Depends(get_current_session),
):
    """Replace the embedded GitHub token; the client is rebound and commits re-synced."""
    session = await session_registry.refresh_token(session.user_id, token_data.provider_token)
    return SessionOut.model_validate(session)


@router.post(
    "/session/refresh",
    response_model=SessionOut,
    summary="Rebind GitHub and re-sync"
)
async def refresh_session(session: AuthSession = Depends(get_current_session)):
    """Rebind the GitHub client to the session's current token and sync commits."""
    if not session.provider_token:
        raise NoTokenError()
    session = await session_registry.refresh_token(session.user_id, session.provider_token)
    return SessionOut.model_validate(session)


@router.delete(
    "/session",
    response_model=SuccessResponse,
    summary="Sign out"
)
async def sign_out(identity: Identity = Depends(get_current_identity)):
    """End the session and release the GitHub client."""
    await session_registry.sign_out(identity.user_id)
    return SuccessResponse(message="Signed out successfully")
