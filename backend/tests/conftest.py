import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Optional  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402
from zoneinfo import ZoneInfo  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from songboard.database import get_session  # noqa: E402
from songboard.main import app  # noqa: E402
from songboard.models.song import Song  # noqa: E402
from songboard.models.system_settings import SystemSettings  # noqa: E402
from songboard.models.user import User, UserRole  # noqa: E402
from songboard.services.cache_service import CacheService, get_cache_service  # noqa: E402
from songboard.services.quota import local_now  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# Wednesday afternoon, so "this week" already contains Monday and Tuesday
FIXED_NOW = datetime(2026, 10, 14, 15, 0, tzinfo=ZoneInfo("Asia/Shanghai"))

# sqlite:///:memory: + StaticPool: every session (test and app) shares one DB.
# check_same_thread=False is needed for TestClient's worker thread.
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on freshly created tables"""
    # Import all models to ensure they're registered BEFORE create_all
    from songboard.models.schedule import Schedule  # noqa: F401
    from songboard.models.vote import Vote  # noqa: F401

    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="cache")
def cache_fixture():
    """Cache service double; no Redis needed"""
    return MagicMock(spec=CacheService)


@pytest.fixture(name="client")
def client_fixture(session: Session, cache):
    """Provide a test client with overridden session, cache and clock

    Overrides are set BEFORE TestClient() so the app never uses its own engine.
    """
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_cache_service] = lambda: cache
    app.dependency_overrides[local_now] = lambda: FIXED_NOW

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------


def make_user(session: Session, username: str, role: UserRole = UserRole.USER) -> User:
    user = User(username=username, role=role, auth_token=f"token-{username}")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_song(
    session: Session,
    requester: User,
    *,
    title: str = "Song",
    semester: str = "2024-S1",
    played: bool = False,
    created_at: Optional[datetime] = None,
) -> Song:
    song = Song(
        title=title,
        artist="Artist",
        requester_id=requester.id,
        semester=semester,
        played=played,
        created_at=(created_at or FIXED_NOW - timedelta(hours=2)).astimezone(timezone.utc),
    )
    session.add(song)
    session.commit()
    session.refresh(song)
    return song


def set_limits(session: Session, daily=None, weekly=None) -> SystemSettings:
    settings = SystemSettings(daily_submission_limit=daily, weekly_submission_limit=weekly)
    session.add(settings)
    session.commit()
    return settings


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {user.auth_token}"}
