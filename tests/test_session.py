from __future__ import annotations

import asyncio

import httpx
import pytest

from app.core.exceptions import NotFoundError
from app.core.session import SessionEvent, SessionRegistry, session_registry
from app.models.commit_record import CommitRecord
from app.models.profile import Profile
from app.services.github_client import GitHubClientRegistry
from app.services.github_sync import GitHubSyncService, SyncTrigger
from app.services.token_provider import SessionTokenProvider
from app.crud.commit_record import CRUDCommitRecord
from app.core.cache import TTLCache


def _github_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/user":
            return httpx.Response(
                200, json={"login": "octocat", "id": 1, "name": "Mona Lisa", "avatar_url": "https://x/a.png"}
            )
        return httpx.Response(200, json=[{
            "id": "1",
            "type": "PushEvent",
            "created_at": None,
            "repo": {"name": "octocat/hello"},
            "payload": {"commits": [{"sha": "s1", "message": "hello"}]},
        }])

    return httpx.MockTransport(handler)


def test_listeners_receive_events_until_unsubscribed(user_id):
    registry = SessionRegistry()
    received = []

    async def listener(event, session):
        received.append((event, session.user_id))

    unsubscribe = registry.subscribe(listener)

    async def _run():
        await registry.sign_in(user_id, "gho_a")
        await registry.refresh_token(user_id, "gho_b")
        unsubscribe()
        await registry.sign_out(user_id)

    asyncio.run(_run())

    assert received == [(SessionEvent.signed_in, user_id), (SessionEvent.token_refreshed, user_id)]


def test_failing_listener_does_not_break_sign_in(user_id):
    registry = SessionRegistry()

    async def broken(event, session):
        raise RuntimeError("listener bug")

    registry.subscribe(broken)
    session = asyncio.run(registry.sign_in(user_id, "gho_a"))

    assert registry.get(user_id) is session


def test_refresh_without_session_raises(user_id):
    registry = SessionRegistry()
    with pytest.raises(NotFoundError):
        asyncio.run(registry.refresh_token(user_id, "gho_b"))


def test_token_provider_reads_the_current_session_token(user_id):
    registry = SessionRegistry()
    provider = SessionTokenProvider(user_id, sessions=registry)
    assert provider.get_token() is None

    asyncio.run(registry.sign_in(user_id, "gho_a"))
    assert provider.get_token() == "gho_a"

    asyncio.run(registry.refresh_token(user_id, "gho_b"))
    assert provider.get_token() == "gho_b"

    asyncio.run(registry.sign_out(user_id))
    assert provider.get_token() is None


def _trigger(session_factory):
    clients = GitHubClientRegistry(transport=_github_transport())
    store = CRUDCommitRecord(cache=TTLCache())
    return SyncTrigger(
        GitHubSyncService(clients=clients, store=store),
        clients=clients,
        session_factory=session_factory,
    ), clients


def test_sign_in_creates_profile_and_syncs(session_factory, db, user_id):
    trigger, clients = _trigger(session_factory)
    unsubscribe = session_registry.subscribe(trigger)

    async def _run():
        try:
            return await session_registry.sign_in(user_id, "gho_token")
        finally:
            unsubscribe()
            await clients.aclose()

    session = asyncio.run(_run())

    assert session.github_connected is True
    assert session.last_sync_ok is True
    profile = db.query(Profile).filter(Profile.id == user_id).one()
    assert profile.github_username == "octocat"
    assert profile.display_name == "Mona Lisa"
    assert db.query(CommitRecord).filter(CommitRecord.user_id == user_id).count() == 1


def test_sign_in_without_token_still_creates_profile(session_factory, db, user_id):
    trigger, clients = _trigger(session_factory)
    unsubscribe = session_registry.subscribe(trigger)
    try:
        session = asyncio.run(session_registry.sign_in(user_id, None))
    finally:
        unsubscribe()

    assert session.github_connected is False
    assert session.last_sync_ok is None
    profile = db.query(Profile).filter(Profile.id == user_id).one()
    assert profile.sleep_goal_hours == 8.0
    assert profile.commit_goal_daily == 5


def test_results_are_dropped_for_a_session_that_ended(session_factory, user_id):
    registry = SessionRegistry()
    trigger, clients = _trigger(session_factory)
    session = asyncio.run(registry.sign_in(user_id, "gho_token"))
    asyncio.run(registry.sign_out(user_id))

    trigger._apply(session, connected=True, sync_ok=True)

    assert session.github_connected is False
    assert session.last_sync_ok is None
