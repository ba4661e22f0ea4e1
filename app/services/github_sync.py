# services/github_sync.py
import logging
from datetime import timedelta
from typing import Callable
from uuid import UUID
from sqlalchemy.orm import Session

from app.core.config import settings, SessionLocal
from app.core.exceptions import NoTokenError
from app.core.session import AuthSession, SessionEvent
from app.crud.commit_record import CRUDCommitRecord, crud_commit_record
from app.schemas.commit_record import CommitRecordCreate
from app.services.github_client import GitHubClientRegistry, github_clients
from app.services.profile import ProfileService, profile_service
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)


# =====================================================================
# SYNC ORCHESTRATOR
# =====================================================================

class GitHubSyncService:
    """Copies recent GitHub push-event commits into the commit store."""

    def __init__(
        self,
        clients: GitHubClientRegistry = github_clients,
        store: CRUDCommitRecord = crud_commit_record,
    ):
        self.clients = clients
        self.store = store

    async def sync_commits(self, db: Session, user_id: UUID) -> bool:
        """
        Insert one commit record per commit in the lookback window's push events.

        Writes are sequential, one per commit, with no existence check: the
        store ignores commits it already holds. Any error abandons the run,
        keeps whatever was written so far, and returns False.
        """
        try:
            logger.info(f"Starting GitHub commit sync for user {user_id}")
            end = utcnow()
            start = end - timedelta(days=settings.SYNC_LOOKBACK_DAYS)

            client = self.clients.for_user(user_id)
            events = await client.list_recent_push_events(start)
            logger.info(f"Fetched {len(events)} push events for user {user_id}")

            added = 0
            for event in events:
                logger.debug(f"Processing commits for repository {event.repo.name}")
                for commit in event.payload.commits:
                    record = self.store.insert(
                        db,
                        obj_in=CommitRecordCreate(
                            user_id=user_id,
                            commit_timestamp=event.created_at or utcnow(),
                            repository=event.repo.name,
                            commit_message=commit.message,
                            commit_hash=commit.sha,
                        ),
                    )
                    if record is not None:
                        added += 1

            logger.info(f"GitHub commit sync completed for user {user_id}: {added} new commits")
            return True
        except Exception:
            logger.exception(f"Error syncing GitHub commits for user {user_id}")
            return False


# =====================================================================
# SESSION LISTENER
# =====================================================================

class SyncTrigger:
    """
    Session-change listener that keeps the GitHub binding and commit table
    current: sign-in initializes and syncs, a token rotation rebinds and
    syncs, sign-out drops the client.

    Results are written back to the session only while it is still active.
    """

    def __init__(
        self,
        sync_service: GitHubSyncService,
        clients: GitHubClientRegistry = github_clients,
        profiles: ProfileService = profile_service,
        session_factory: Callable[[], Session] = SessionLocal,
    ):
        self.sync_service = sync_service
        self.clients = clients
        self.profiles = profiles
        self.session_factory = session_factory

    async def __call__(self, event: SessionEvent, session: AuthSession) -> None:
        if event == SessionEvent.signed_in:
            await self.on_signed_in(session)
        elif event == SessionEvent.token_refreshed:
            await self.on_token_refreshed(session)
        elif event == SessionEvent.signed_out:
            await self.clients.discard(session.user_id)

    async def on_signed_in(self, session: AuthSession) -> bool:
        client = self.clients.for_user(session.user_id)
        try:
            client.initialize()
        except NoTokenError:
            logger.warning(f"GitHub initialization failed for user {session.user_id}: no token")
            with self.session_factory() as db:
                await self.profiles.ensure_profile(db, user_id=session.user_id)
            self._apply(session, connected=False, sync_ok=None)
            return False

        with self.session_factory() as db:
            await self.profiles.ensure_profile(db, user_id=session.user_id, client=client)
            ok = await self.sync_service.sync_commits(db, session.user_id)

        self._apply(session, connected=True, sync_ok=ok)
        return ok

    async def on_token_refreshed(self, session: AuthSession) -> bool:
        client = self.clients.for_user(session.user_id)
        try:
            await client.refresh()
        except NoTokenError:
            logger.warning(f"GitHub token refresh failed for user {session.user_id}: no token")
            self._apply(session, connected=False, sync_ok=None)
            return False

        return await self.run(session)

    async def run(self, session: AuthSession) -> bool:
        """Sync now for an existing session (manual refresh)."""
        with self.session_factory() as db:
            ok = await self.sync_service.sync_commits(db, session.user_id)
        self._apply(session, connected=self.clients.for_user(session.user_id).initialized, sync_ok=ok)
        return ok

    def _apply(self, session: AuthSession, *, connected: bool, sync_ok) -> None:
        if not session.active:
            logger.debug(f"Session for user {session.user_id} ended before sync finished, result dropped")
            return
        session.github_connected = connected
        if sync_ok is not None:
            session.last_sync_ok = sync_ok
            session.last_synced_at = utcnow()


# =====================================================================
# SINGLETON INSTANCES
# =====================================================================

github_sync_service = GitHubSyncService()
sync_trigger = SyncTrigger(github_sync_service)
