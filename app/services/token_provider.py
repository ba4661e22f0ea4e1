# services/token_provider.py
from typing import Optional
from uuid import UUID

from app.core.session import SessionRegistry, session_registry


class SessionTokenProvider:
    """
    Supplies the GitHub access token for one signed-in identity.

    Reads the provider token embedded in the identity's session on every
    call; it keeps no copy of its own, so a rotated token is seen immediately.
    """

    def __init__(self, user_id: UUID, sessions: SessionRegistry = session_registry):
        self.user_id = user_id
        self.sessions = sessions

    def get_token(self) -> Optional[str]:
        session = self.sessions.get(self.user_id)
        if session is None or not session.provider_token:
            return None
        return session.provider_token
