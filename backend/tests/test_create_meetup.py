from datetime import timedelta, timezone, datetime

import pytest
from pydantic import ValidationError

from meetups.core.models import Meetup, utcnow
from meetups.schemas import MeetupCreate


def meetup_payload(organizer_id, **overrides):
    payload = {
        "title": "Python evening",
        "description": "Talks and pizza",
        "date": (utcnow() + timedelta(days=1)).isoformat(),
        "time": "18:30",
        "location": "Main library",
        "organizer_id": organizer_id,
    }
    payload.update(overrides)
    return payload


def test_create_meetup(client, db, make_user):
    organizer = make_user()

    response = client.post("/rpc/createMeetup", json=meetup_payload(organizer.id))

    assert response.status_code == 201
    body = response.json()
    assert body["id"]
    assert body["created_at"]
    assert body["title"] == "Python evening"
    assert body["time"] == "18:30"
    assert body["organizer_id"] == organizer.id
    assert db.query(Meetup).count() == 1


def test_create_meetup_past_date_rejected_before_insert(client, db, make_user):
    organizer = make_user()
    yesterday = (utcnow() - timedelta(days=1)).isoformat()

    response = client.post("/rpc/createMeetup", json=meetup_payload(organizer.id, date=yesterday))

    assert response.status_code == 422
    assert "Date must be in the future" in response.text
    assert db.query(Meetup).count() == 0


def test_create_meetup_unknown_organizer(client, db):
    response = client.post("/rpc/createMeetup", json=meetup_payload(9999))

    assert response.status_code == 400
    assert response.json()["code"] == "INTEGRITY_ERROR"
    assert db.query(Meetup).count() == 0


@pytest.mark.parametrize("value", ["9:05", "00:00", "23:59", "18:30"])
def test_time_format_accepted(value):
    data = MeetupCreate(**meetup_payload(1, time=value))
    assert data.time == value


@pytest.mark.parametrize("value", ["24:00", "12:60", "1230", "ab:cd", "12:5", ""])
def test_time_format_rejected(value):
    with pytest.raises(ValidationError, match="HH:MM"):
        MeetupCreate(**meetup_payload(1, time=value))


@pytest.mark.parametrize("field", ["title", "description", "location"])
def test_empty_text_fields_rejected(field):
    with pytest.raises(ValidationError):
        MeetupCreate(**meetup_payload(1, **{field: ""}))


def test_date_only_string_accepted():
    tomorrow = (utcnow() + timedelta(days=2)).date().isoformat()

    data = MeetupCreate(**meetup_payload(1, date=tomorrow))

    assert data.date.date().isoformat() == tomorrow


def test_aware_date_normalized_to_naive_utc():
    moment = datetime.now(timezone(timedelta(hours=3))) + timedelta(days=1)

    data = MeetupCreate(**meetup_payload(1, date=moment.isoformat()))

    assert data.date.tzinfo is None
    assert data.date == moment.astimezone(timezone.utc).replace(tzinfo=None)


def test_invalid_date_rejected():
    with pytest.raises(ValidationError):
        MeetupCreate(**meetup_payload(1, date="next tuesday"))


@pytest.mark.parametrize("organizer_id", [2**63, 2**31, 0, -1])
def test_create_meetup_out_of_range_organizer_id(client, db, organizer_id):
    response = client.post("/rpc/createMeetup", json=meetup_payload(organizer_id))

    assert response.status_code == 422
    assert db.query(Meetup).count() == 0


def test_meetup_datetimes_serialized_as_utc(client, make_user):
    organizer = make_user()
    moment = (utcnow() + timedelta(days=1)).replace(microsecond=0)

    body = client.post(
        "/rpc/createMeetup", json=meetup_payload(organizer.id, date=moment.isoformat() + "+00:00")
    ).json()

    assert body["date"] == moment.isoformat() + "Z"
    assert body["created_at"].endswith("Z")
    assert datetime.fromisoformat(body["date"].replace("Z", "+00:00")) == moment.replace(tzinfo=timezone.utc)
