from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOCAL_TIMEZONE", "UTC")

from app.core.config import Base  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.core.session import session_registry  # noqa: E402
from app.crud.activity_insight import crud_activity_insight  # noqa: E402
from app.crud.commit_record import crud_commit_record  # noqa: E402
from app.crud.sleep_record import crud_sleep_record  # noqa: E402
import app.models  # noqa: E402,F401


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _reset_shared_state():
    for store in (crud_sleep_record, crud_commit_record, crud_activity_insight):
        store.cache.clear()
    session_registry.clear()
    yield
    for store in (crud_sleep_record, crud_commit_record, crud_activity_insight):
        store.cache.clear()
    session_registry.clear()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    token = create_access_token(user_id, email="dev@example.com")
    return {"Authorization": f"Bearer {token}"}
