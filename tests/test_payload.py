"""Stage/viewer partition, time rendering and form encoding."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from video_service.models import CalendarEvent
from video_service.payload import (
    STAGE_CAPACITY,
    build_session_body,
    build_session_fields,
    encode_form,
    encode_uri_component,
    format_session_time,
    partition_participants,
)


def make_event(**overrides) -> CalendarEvent:
    data = {
        "title": "Pod: Ep 1",
        "startTime": "2024-03-05T19:30:00Z",
        "endTime": "2024-03-05T20:00:00Z",
        "organizer": {"id": 7, "email": "o@x.com", "timeZone": "America/New_York"},
        "attendees": [{"email": "a@x.com"}, {"email": "g@x.com"}],
        "guests": ["g@x.com"],
    }
    data.update(overrides)
    return CalendarEvent.model_validate(data)


def test_small_party_keeps_everyone_on_stage() -> None:
    """Organizer and attendees fit on stage; guests only view."""

    partition = partition_participants(
        organizer="o@x.com",
        attendees=["o@x.com", "a@x.com", "b@x.com"],
        guests=["g@x.com"],
    )

    assert partition.stage == ["o@x.com", "a@x.com", "b@x.com"]
    assert partition.viewer == ["g@x.com"]


def test_guests_listed_as_attendees_are_not_on_stage() -> None:
    partition = partition_participants(
        organizer="o@x.com",
        attendees=["a@x.com", "g@x.com"],
        guests=["g@x.com"],
    )

    assert partition.stage == ["o@x.com", "a@x.com"]
    assert partition.viewer == ["g@x.com"]


def test_team_members_follow_attendees() -> None:
    partition = partition_participants(
        organizer="o@x.com",
        attendees=["a@x.com"],
        guests=[],
        team_members=["t1@x.com", "t2@x.com"],
    )

    assert partition.stage == ["o@x.com", "a@x.com", "t1@x.com", "t2@x.com"]
    assert partition.viewer == []


def test_overflow_moves_to_viewer_ahead_of_guests() -> None:
    """Only ten stage seats exist; the rest keep their order in the viewer list."""

    attendees = [f"a{i}@x.com" for i in range(12)]
    guests = ["g1@x.com", "g2@x.com"]

    partition = partition_participants(
        organizer="o@x.com",
        attendees=attendees,
        guests=guests,
    )

    everyone = ["o@x.com", *attendees]
    assert len(partition.stage) == STAGE_CAPACITY
    assert partition.stage[0] == "o@x.com"
    assert partition.stage == everyone[:10]
    assert partition.viewer == everyone[10:] + guests
    assert not set(partition.stage) & set(partition.viewer)
    assert set(partition.stage) | set(partition.viewer) == set(everyone) | set(guests)


def test_guests_never_reach_stage_even_as_team_members() -> None:
    partition = partition_participants(
        organizer="o@x.com",
        attendees=["a@x.com"],
        guests=["t1@x.com"],
        team_members=["t1@x.com", "t2@x.com"],
    )

    assert "t1@x.com" not in partition.stage
    assert partition.viewer == ["t1@x.com"]


def test_exactly_ten_fit_on_stage() -> None:
    attendees = [f"a{i}@x.com" for i in range(9)]

    partition = partition_participants(
        organizer="o@x.com",
        attendees=attendees,
        guests=["g@x.com"],
    )

    assert partition.stage == ["o@x.com", *attendees]
    assert partition.viewer == ["g@x.com"]


def test_twelve_hour_clock_is_zero_padded() -> None:
    midnight = datetime(2024, 1, 1, 0, 5, tzinfo=timezone.utc)
    afternoon = datetime(2024, 1, 1, 14, 30, tzinfo=timezone.utc)

    assert format_session_time(midnight, "UTC") == "12:05 AM"
    assert format_session_time(afternoon, "UTC") == "02:30 PM"


def test_create_renders_in_organizer_zone_and_update_in_utc() -> None:
    event = make_event()

    create = dict(build_session_fields(event, "create"))
    update = dict(build_session_fields(event, "update"))

    assert create["startTime"] == "02:30 PM"
    assert create["endTime"] == "03:00 PM"
    assert update["startTime"] == "07:30 PM"
    assert update["endTime"] == "08:00 PM"
    assert create["timeZone"] == update["timeZone"] == "America/New_York"


def test_date_follows_the_rendering_zone() -> None:
    event = make_event(startTime="2024-03-06T02:00:00Z", endTime="2024-03-06T03:00:00Z")

    assert dict(build_session_fields(event, "create"))["date"] == "2024-03-05"
    assert dict(build_session_fields(event, "update"))["date"] == "2024-03-06"


def test_naive_instants_are_read_as_utc() -> None:
    event = make_event(startTime="2024-03-05T19:30:00", endTime="2024-03-05T20:00:00")

    assert dict(build_session_fields(event, "update"))["startTime"] == "07:30 PM"


def test_unknown_organizer_zone_fails_validation() -> None:
    organizer = {"id": 7, "email": "o@x.com", "timeZone": "Mars/Olympus_Mons"}

    with pytest.raises(ValidationError):
        make_event(organizer=organizer)


def test_create_body_matches_provider_encoding() -> None:
    event = make_event()

    body = build_session_body(event, "create", show_id="show 1")

    assert body == (
        "sessionTitle=Pod%3A%20Ep%201"
        "&date=2024-03-05"
        "&startTime=02%3A30%20PM"
        "&endTime=03%3A00%20PM"
        "&timeZone=America%2FNew_York"
        "&stage=o%40x.com"
        "&stage=a%40x.com"
        "&viewer=g%40x.com"
        "&showID=show%201"
    )


def test_show_id_omitted_when_unbound() -> None:
    fields = build_session_fields(make_event(), "create")

    assert "showID" not in dict(fields)


def test_empty_lists_contribute_nothing() -> None:
    assert encode_form([("a", "1"), ("viewer", []), ("b", "2")]) == "a=1&b=2"


def test_uri_component_matches_javascript() -> None:
    assert encode_uri_component("a!*'()~-_.b") == "a!*'()~-_.b"
    assert encode_uri_component("x y+z&=/?") == "x%20y%2Bz%26%3D%2F%3F"
    assert encode_uri_component("é") == "%C3%A9"
