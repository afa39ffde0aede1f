# tests/v1/test_users.py
"""Tests for the current-user endpoint."""

from fastapi import status

from huddle.models import Tag, UserTag


def test_get_me(client, test_user, auth_token, db_session) -> None:
    tag = Tag(name="climbing")
    db_session.add(tag)
    db_session.flush()
    db_session.add(UserTag(user_id=test_user.user_id, tag_id=tag.id))
    db_session.flush()

    response = client.get("/api/v1/users/me", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["user_id"] == test_user.user_id
    assert data["external_id"] == test_user.external_id
    assert data["city"] == "Lisbon"
    assert data["interest_ids"] == [tag.id]


def test_get_me_without_token(client) -> None:
    response = client.get("/api/v1/users/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Unauthorized"


def test_get_me_with_invalid_token(client) -> None:
    response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Could not validate credentials"


def test_get_me_before_onboarding(client, make_auth_headers) -> None:
    response = client.get("/api/v1/users/me", headers=make_auth_headers("user_unknown"))
    assert response.status_code == status.HTTP_404_NOT_FOUND
