# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import timedelta
from itertools import count
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_JWT_KEY", "test-session-key")

from huddle.api.v1.dependencies import (
    get_identity_client_dep,
    get_location_client_dep,
    get_storage_client_dep,
)
from huddle.core.security import create_session_token
from huddle.db.session import Base
from huddle.db.session import get_db as app_get_session
from huddle.db.time import utcnow
from huddle.main import app as fastapi_app
from huddle.models import ChatRoom, Community, CommunityMember, Event, Tag, User
from huddle.models.community import MEMBER_ROLE_OWNER
from huddle.services.identity import IdentityClient
from huddle.services.locations import LocationClient
from huddle.services.storage import StorageClient

TEST_DB_URL = "sqlite://"

_EXTERNAL_ID_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_user(db_session: Session, **fields) -> User:
    """Persist a user with a unique external id."""
    fields.setdefault("external_id", f"user_test_{next(_EXTERNAL_ID_COUNTER)}")
    user = User(**fields)
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    return user


def auth_headers_for(external_id: str, *, onboarding_complete: bool = True) -> dict[str, str]:
    token = create_session_token(external_id, onboarding_complete=onboarding_complete)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def test_user(db_session: Session) -> Iterator[User]:
    """Create and return a persisted, fully onboarded test user."""
    yield make_user(db_session, bio="Test bio", city="Lisbon", country="Portugal")


@pytest.fixture()
def other_user(db_session: Session) -> Iterator[User]:
    """Create and return a second persisted user."""
    yield make_user(db_session, city="Porto", country="Portugal")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers_for(test_user.external_id)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers_for(other_user.external_id)


@pytest.fixture()
def tag(db_session: Session) -> Iterator[Tag]:
    tag = Tag(name="hiking")
    db_session.add(tag)
    db_session.flush()
    db_session.refresh(tag)
    yield tag


@pytest.fixture()
def community(db_session: Session, test_user: User) -> Iterator[Community]:
    """Create a community owned by ``test_user`` with a general chat room."""
    community = Community(
        name="Test Community",
        description="Test community description",
        owner_id=test_user.user_id,
        city="Lisbon",
        country="Portugal",
        member_count=1,
    )
    db_session.add(community)
    db_session.flush()
    db_session.add(ChatRoom(community_id=community.id, name="general", type="text"))
    db_session.add(
        CommunityMember(
            community_id=community.id,
            user_id=test_user.user_id,
            role=MEMBER_ROLE_OWNER,
        )
    )
    db_session.flush()
    db_session.refresh(community)
    yield community


@pytest.fixture()
def test_event(db_session: Session, community: Community, test_user: User) -> Iterator[Event]:
    """Create an event starting tomorrow in ``community``."""
    start = utcnow() + timedelta(days=1)
    event_row = Event(
        title="Morning Walk",
        description="A walk along the river",
        start_time=start,
        end_time=start + timedelta(hours=2),
        address="Praça do Comércio",
        city="Lisbon",
        country="Portugal",
        community_id=community.id,
        created_by=test_user.user_id,
    )
    db_session.add(event_row)
    db_session.flush()
    db_session.refresh(event_row)
    yield event_row


@pytest.fixture()
def mock_identity(app: FastAPI) -> Iterator[AsyncMock]:
    """Replace the identity client with an async mock."""
    identity = AsyncMock(spec=IdentityClient)
    identity.update_metadata.return_value = {}
    identity.update_profile_image.return_value = {}
    app.dependency_overrides[get_identity_client_dep] = lambda: identity
    try:
        yield identity
    finally:
        app.dependency_overrides.pop(get_identity_client_dep, None)


@pytest.fixture()
def mock_locations(app: FastAPI) -> Iterator[AsyncMock]:
    """Replace the location client with an async mock."""
    locations = AsyncMock(spec=LocationClient)
    app.dependency_overrides[get_location_client_dep] = lambda: locations
    try:
        yield locations
    finally:
        app.dependency_overrides.pop(get_location_client_dep, None)


@pytest.fixture()
def mock_storage(app: FastAPI) -> Iterator[AsyncMock]:
    """Replace the storage client with an async mock."""
    storage = AsyncMock(spec=StorageClient)
    storage.upload_community_image.return_value = (
        "https://storage.test/storage/v1/object/public/community-images/community_images/1_ab.jpg"
    )
    app.dependency_overrides[get_storage_client_dep] = lambda: storage
    try:
        yield storage
    finally:
        app.dependency_overrides.pop(get_storage_client_dep, None)


@pytest.fixture()
def make_auth_headers():
    """Return a factory building session headers for any external id."""
    return auth_headers_for
