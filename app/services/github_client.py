# services/github_client.py
import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import FetchError, NoTokenError
from app.schemas.github import GitHubProfile, PushEvent
from app.services.token_provider import SessionTokenProvider
from app.utils.datetime_utils import as_utc

logger = logging.getLogger(__name__)

USER_AGENT = "developer-wellness-api"


class GitHubClient:
    """
    Source activity client for one authenticated GitHub identity.

    ``initialize()`` binds an HTTP client to the token the provider currently
    returns; it is a no-op while a client is bound. ``refresh()`` drops the
    binding and initializes again, picking up a rotated token.
    """

    def __init__(
        self,
        token_provider: SessionTokenProvider,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token_provider = token_provider
        self.base_url = base_url or settings.GITHUB_API_BASE
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._login: Optional[str] = None

    @property
    def initialized(self) -> bool:
        return self._client is not None

    # =====================================================================
    # BINDING
    # =====================================================================

    def initialize(self) -> None:
        if self._client is not None:
            return

        token = self.token_provider.get_token()
        if not token:
            raise NoTokenError()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": settings.GITHUB_API_VERSION,
                "User-Agent": USER_AGENT,
            },
            transport=self.transport,
        )

    async def refresh(self) -> None:
        await self.aclose()
        self.initialize()

    async def aclose(self) -> None:
        client, self._client = self._client, None
        self._login = None
        if client is not None:
            await client.aclose()

    def _ensure_initialized(self) -> httpx.AsyncClient:
        if self._client is None:
            self.initialize()
        return self._client

    # =====================================================================
    # REQUESTS
    # =====================================================================

    async def _get_json(self, path: str, params: Optional[Dict] = None, action: str = "fetch"):
        client = self._ensure_initialized()
        try:
            response = await client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise FetchError(f"Failed to {action}", cause=e) from e

    async def get_authenticated_profile(self) -> GitHubProfile:
        """Public profile of the token's owner."""
        data = await self._get_json("/user", action="fetch user profile")
        try:
            profile = GitHubProfile.model_validate(data)
        except ValidationError as e:
            raise FetchError("Failed to fetch user profile", cause=e) from e

        self._login = profile.login
        return profile

    async def list_recent_push_events(self, since: datetime) -> List[PushEvent]:
        """
        Push events with at least one commit, from the first page (up to
        ``GITHUB_EVENTS_PER_PAGE``) of the authenticated identity's events.

        Events older than ``since`` are dropped; events without a timestamp
        are kept. No pagination and no retries.

        Raises:
            NoTokenError: If no token is available to bind
            FetchError: On any transport or API failure
        """
        if self._login is None:
            await self.get_authenticated_profile()

        since = as_utc(since)
        data = await self._get_json(
            f"/users/{self._login}/events",
            params={"per_page": settings.GITHUB_EVENTS_PER_PAGE, "since": since.isoformat()},
            action="fetch commits",
        )
        if not isinstance(data, list):
            raise FetchError("Failed to fetch commits: unexpected response shape")

        events: List[PushEvent] = []
        for raw in data:
            if not isinstance(raw, dict) or raw.get("type") != "PushEvent":
                continue
            try:
                event = PushEvent.model_validate(raw)
            except ValidationError as e:
                raise FetchError("Failed to fetch commits", cause=e) from e

            if not event.payload.commits:
                continue
            if event.created_at is not None and as_utc(event.created_at) < since:
                continue
            events.append(event)

        logger.debug(f"Fetched {len(events)} push events since {since.isoformat()}")
        return events


class GitHubClientRegistry:
    """One GitHubClient per signed-in identity."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.transport = transport
        self._clients: Dict[UUID, GitHubClient] = {}

    def for_user(self, user_id: UUID) -> GitHubClient:
        client = self._clients.get(user_id)
        if client is None:
            client = GitHubClient(SessionTokenProvider(user_id), transport=self.transport)
            self._clients[user_id] = client
        return client

    async def discard(self, user_id: UUID) -> None:
        client = self._clients.pop(user_id, None)
        if client is not None:
            await client.aclose()

    async def aclose(self) -> None:
        for user_id in list(self._clients):
            await self.discard(user_id)


# =====================================================================
# SINGLETON INSTANCE
# =====================================================================

github_clients = GitHubClientRegistry()
