# app/core/session.py
"""
Auth collaborator session state.

The OAuth handshake happens at the auth provider. Once a client holds the
provider's access token and the GitHub token embedded in its session, it
registers that session here. Every change (sign-in, sign-out, token rotation)
is published to subscribed listeners, which is how the commit sync is
triggered.
"""
import enum
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, List, Optional
from uuid import UUID

from app.core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class SessionEvent(str, enum.Enum):
    signed_in = "signed_in"
    signed_out = "signed_out"
    token_refreshed = "token_refreshed"


class AuthSession:
    """Identity plus the provider token embedded in its session."""

    def __init__(self, user_id: UUID, provider_token: Optional[str], email: Optional[str] = None):
        self.user_id = user_id
        self.provider_token = provider_token
        self.email = email
        self.created_at = datetime.now(timezone.utc)

        # Cleared on sign-out; listeners check it before applying results
        self.active = True

        self.github_connected = False
        self.last_sync_ok: Optional[bool] = None
        self.last_synced_at: Optional[datetime] = None


SessionListener = Callable[[SessionEvent, AuthSession], Awaitable[None]]


class SessionRegistry:
    """In-memory session store with a session-change event stream."""

    def __init__(self):
        self._sessions: Dict[UUID, AuthSession] = {}
        self._listeners: List[SessionListener] = []

    # =====================================================================
    # SUBSCRIPTIONS
    # =====================================================================

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _emit(self, event: SessionEvent, session: AuthSession) -> None:
        for listener in list(self._listeners):
            try:
                await listener(event, session)
            except Exception:
                logger.exception(f"Session listener failed on {event.value} for user {session.user_id}")

    # =====================================================================
    # SESSION STATE
    # =====================================================================

    def get(self, user_id: UUID) -> Optional[AuthSession]:
        return self._sessions.get(user_id)

    async def sign_in(
        self, user_id: UUID, provider_token: Optional[str], email: Optional[str] = None
    ) -> AuthSession:
        previous = self._sessions.get(user_id)
        if previous is not None:
            previous.active = False

        session = AuthSession(user_id=user_id, provider_token=provider_token, email=email)
        self._sessions[user_id] = session
        logger.info(f"Session established for user {user_id}")

        await self._emit(SessionEvent.signed_in, session)
        return session

    async def refresh_token(self, user_id: UUID, provider_token: str) -> AuthSession:
        session = self._sessions.get(user_id)
        if session is None:
            raise NotFoundError("No active session")

        session.provider_token = provider_token
        logger.info(f"Provider token rotated for user {user_id}")

        await self._emit(SessionEvent.token_refreshed, session)
        return session

    async def sign_out(self, user_id: UUID) -> Optional[AuthSession]:
        session = self._sessions.pop(user_id, None)
        if session is None:
            return None

        session.active = False
        logger.info(f"Session closed for user {user_id}")

        await self._emit(SessionEvent.signed_out, session)
        return session

    def clear(self) -> None:
        for session in self._sessions.values():
            session.active = False
        self._sessions.clear()


# =====================================================================
# SINGLETON INSTANCE
# =====================================================================

session_registry = SessionRegistry()
