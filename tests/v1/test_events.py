# tests/v1/test_events.py
"""Tests for event creation, detail, listing and RSVP endpoints."""

from datetime import timedelta

from fastapi import status

from huddle.db.time import utcnow
from huddle.models import Event, EventAttendee


def _event_payload(**overrides):
    start = utcnow() + timedelta(days=3)
    payload = {
        "title": "Sunset Picnic",
        "description": "Bring snacks and a blanket",
        "start_time": start.isoformat(),
        "end_time": (start + timedelta(hours=3)).isoformat(),
        "address": "Jardim da Estrela",
        "city": "Lisbon",
        "country": "Portugal",
        "location_url": "https://maps.example.com/estrela",
        "max_attendees": "25",
    }
    payload.update(overrides)
    return payload


def test_create_event(client, test_user, auth_token, community, db_session) -> None:
    response = client.post(
        f"/api/v1/communities/{community.id}/events",
        json=_event_payload(),
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["title"] == "Sunset Picnic"
    assert data["max_attendees"] == 25
    assert data["created_by"] == test_user.user_id
    assert data["community_id"] == community.id
    assert data["is_online"] is False


def test_create_event_blank_optional_fields(client, auth_token, community, db_session) -> None:
    response = client.post(
        f"/api/v1/communities/{community.id}/events",
        json=_event_payload(end_time=None, location_url="", max_attendees=""),
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["max_attendees"] is None
    assert data["location_url"] is None
    assert data["end_time"] is None


def test_create_event_validation_errors(client, auth_token, community, db_session) -> None:
    response = client.post(
        f"/api/v1/communities/{community.id}/events",
        json={"title": "ab", "max_attendees": "lots", "location_url": "not a url"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    errors = response.json()["detail"]["errors"]
    assert errors == {
        "title": "Title must be at least 3 characters",
        "description": "Event description is required",
        "start_time": "Start date/time is required",
        "address": "Address is required",
        "city": "City is required",
        "country": "Country is required",
        "max_attendees": "Maximum attendees must be a positive number",
        "location_url": "Please enter a valid URL (e.g., https://maps.google.com)",
    }
    assert db_session.query(Event).count() == 0


def test_create_event_start_after_end(client, auth_token, community) -> None:
    start = utcnow() + timedelta(days=2)
    response = client.post(
        f"/api/v1/communities/{community.id}/events",
        json=_event_payload(
            start_time=start.isoformat(),
            end_time=(start - timedelta(hours=1)).isoformat(),
        ),
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["detail"]["errors"] == {
        "start_time": "Start date cannot be after end date"
    }


def test_create_event_rejects_zero_attendees(client, auth_token, community) -> None:
    response = client.post(
        f"/api/v1/communities/{community.id}/events",
        json=_event_payload(max_attendees="0"),
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "max_attendees" in response.json()["detail"]["errors"]


def test_create_event_unknown_community(client, auth_token) -> None:
    response = client.post(
        "/api/v1/communities/99999/events",
        json=_event_payload(),
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_community_events(client, community, test_event) -> None:
    response = client.get(f"/api/v1/communities/{community.id}/events")
    assert response.status_code == status.HTTP_200_OK
    assert [e["id"] for e in response.json()] == [test_event.id]


def test_get_event_detail(client, test_user, test_event, other_user, db_session) -> None:
    db_session.add(EventAttendee(event_id=test_event.id, user_id=other_user.user_id))
    db_session.flush()

    response = client.get(f"/api/v1/events/{test_event.id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["title"] == "Morning Walk"
    assert data["created_by_user"]["user_id"] == test_user.user_id
    assert len(data["attendees"]) == 1
    assert data["attendees"][0]["user"]["user_id"] == other_user.user_id
    assert data["attendees"][0]["rsvp_status"] == "going"


def test_get_nonexistent_event(client) -> None:
    response = client.get("/api/v1/events/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_latest_events(client, auth_token, community, db_session) -> None:
    titles = ["First event", "Second event", "Third event", "Fourth event"]
    for title in titles:
        response = client.post(
            f"/api/v1/communities/{community.id}/events",
            json=_event_payload(title=title),
            headers=auth_token,
        )
        assert response.status_code == status.HTTP_201_CREATED

    response = client.get("/api/v1/events/latest")
    assert response.status_code == status.HTTP_200_OK
    assert [e["title"] for e in response.json()] == ["Fourth event", "Third event", "Second event"]


def test_rsvp_event(client, other_user, other_auth_token, test_event, db_session) -> None:
    response = client.post(
        f"/api/v1/events/{test_event.id}/rsvp",
        json={"rsvp_status": "maybe"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["rsvp_status"] == "maybe"

    response = client.post(
        f"/api/v1/events/{test_event.id}/rsvp",
        json={"rsvp_status": "going"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    rows = db_session.query(EventAttendee).filter(EventAttendee.event_id == test_event.id).all()
    assert [(row.user_id, row.rsvp_status) for row in rows] == [(other_user.user_id, "going")]


def test_rsvp_unknown_status(client, other_auth_token, test_event) -> None:
    response = client.post(
        f"/api/v1/events/{test_event.id}/rsvp",
        json={"rsvp_status": "perhaps"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_rsvp_full_event(
    client, auth_token, other_auth_token, test_event, db_session
) -> None:
    test_event.max_attendees = 1
    db_session.flush()

    response = client.post(
        f"/api/v1/events/{test_event.id}/rsvp",
        json={"rsvp_status": "going"},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_200_OK

    response = client.post(
        f"/api/v1/events/{test_event.id}/rsvp",
        json={"rsvp_status": "going"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_409_CONFLICT

    # Declining is always allowed.
    response = client.post(
        f"/api/v1/events/{test_event.id}/rsvp",
        json={"rsvp_status": "not_going"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK


def test_rsvp_requires_auth(client, test_event) -> None:
    response = client.post(f"/api/v1/events/{test_event.id}/rsvp", json={})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
