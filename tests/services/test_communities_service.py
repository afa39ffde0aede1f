"""Tests for the community creation sequence."""

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from huddle.db.session import Base
from huddle.models import ChatRoom, Community, CommunityMember, CommunityTag, Tag, User
from huddle.schemas.community import CommunityCreate
from huddle.services import communities as community_service


@pytest.fixture
def isolated_session() -> Iterator[Session]:
    """A plain session on its own database so real rollbacks can be observed."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def _owner(session: Session) -> User:
    user = User(external_id="user_owner")
    session.add(user)
    session.commit()
    return user


def _payload(**overrides) -> CommunityCreate:
    data = {
        "name": "Board Gamers",
        "description": "Weekly game nights",
        "country": "DE",
        "city": "Berlin",
        "tags": ["games", "social"],
    }
    data.update(overrides)
    return CommunityCreate(**data)


def test_create_full_community(isolated_session) -> None:
    owner = _owner(isolated_session)
    community = community_service.create_full_community(isolated_session, owner, _payload())

    assert community.member_count == 1
    assert community.tag_names == ["games", "social"]
    assert [room.name for room in community.chat_rooms] == ["general"]
    member = isolated_session.query(CommunityMember).one()
    assert (member.user_id, member.role) == (owner.user_id, "owner")


def test_validation_failure_writes_nothing(isolated_session) -> None:
    owner = _owner(isolated_session)
    with pytest.raises(community_service.CommunityValidationError) as excinfo:
        community_service.create_full_community(isolated_session, owner, _payload(tags=[]))
    assert excinfo.value.errors == {"tags": "Add at least one tag"}
    assert isolated_session.query(Community).count() == 0


def test_failure_midway_rolls_back_everything(isolated_session, mocker) -> None:
    owner = _owner(isolated_session)
    mocker.patch.object(
        community_service,
        "ensure_tags",
        side_effect=OperationalError("INSERT INTO tags", {}, Exception("disk full")),
    )

    with pytest.raises(community_service.CommunityCreationError):
        community_service.create_full_community(isolated_session, owner, _payload())

    assert isolated_session.query(Community).count() == 0
    assert isolated_session.query(ChatRoom).count() == 0
    assert isolated_session.query(CommunityTag).count() == 0
    assert isolated_session.query(CommunityMember).count() == 0
    assert isolated_session.query(Tag).count() == 0


def test_validate_basic_info_messages() -> None:
    errors = community_service.validate_basic_info(
        CommunityCreate(name=" ab ", description="  ", country="DE", city="", tags=["x"])
    )
    assert errors == {
        "name": "Name must be at least 3 characters",
        "description": "Description is required",
        "city": "Please select a city/state",
    }
