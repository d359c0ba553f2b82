"""Request body construction for the SquadCast sessions endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Sequence, Tuple, Union
from urllib.parse import quote
from zoneinfo import ZoneInfo

from video_service.models import CalendarEvent, StageViewerPartition

STAGE_CAPACITY = 10

# Characters JavaScript's encodeURIComponent leaves untouched on top of the
# alphanumerics and "-_.~" that urllib.parse.quote never escapes.
_URI_COMPONENT_SAFE = "!*'()"

FormValue = Union[str, Sequence[str]]
FormFields = List[Tuple[str, FormValue]]
Action = Literal["create", "update"]


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def encode_form(fields: FormFields) -> str:
    """Serialize ordered fields, repeating the key for every list element."""

    parts: List[str] = []
    for key, value in fields:
        encoded_key = encode_uri_component(key)
        if isinstance(value, str):
            parts.append(f"{encoded_key}={encode_uri_component(value)}")
            continue
        parts.extend(f"{encoded_key}={encode_uri_component(item)}" for item in value)
    return "&".join(parts)


def _unique(emails: Sequence[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for email in emails:
        if email in seen:
            continue
        seen.add(email)
        ordered.append(email)
    return ordered


def partition_participants(
    organizer: str,
    attendees: Sequence[str],
    guests: Sequence[str],
    team_members: Optional[Sequence[str]] = None,
) -> StageViewerPartition:
    """Split participants into on-stage and view-only seats.

    The organizer always takes the first stage seat, followed by non-guest
    attendees and then team members. Stage holds at most ``STAGE_CAPACITY``
    people; overflow moves to the viewer list ahead of the guests. Guests are
    never seated on stage.
    """

    guest_set = set(guests)
    attendees_excluding_guests = [email for email in attendees if email not in guest_set]

    everyone = [organizer, *attendees_excluding_guests]
    if team_members is not None:
        everyone.extend(email for email in team_members if email not in guest_set)
    everyone = _unique(everyone)

    stage = everyone[:STAGE_CAPACITY]
    overflow = everyone[STAGE_CAPACITY:]
    on_stage = set(stage)
    viewer = overflow + [email for email in _unique(guests) if email not in on_stage]
    return StageViewerPartition(stage=stage, viewer=viewer)


def partition_event(event: CalendarEvent) -> StageViewerPartition:
    team_members = None
    if event.team is not None:
        team_members = [member.email for member in event.team.members]
    return partition_participants(
        organizer=event.organizer.email,
        attendees=[attendee.email for attendee in event.attendees],
        guests=event.guests,
        team_members=team_members,
    )


def format_session_date(instant: datetime, tz_name: str) -> str:
    return instant.astimezone(ZoneInfo(tz_name)).strftime("%Y-%m-%d")


def format_session_time(instant: datetime, tz_name: str) -> str:
    """Render ``instant`` as a 12-hour clock time such as ``02:30 PM``."""

    return instant.astimezone(ZoneInfo(tz_name)).strftime("%I:%M %p")[:8]


def build_session_fields(
    event: CalendarEvent,
    action: Action,
    show_id: Optional[str] = None,
) -> FormFields:
    """Return the ordered form fields for a session create or update.

    The create endpoint reads times in the organizer's zone while the update
    endpoint reads them in UTC, so the rendering zone depends on ``action``.
    The ``timeZone`` field is the organizer's zone in both cases.
    """

    tz_name = event.organizer.time_zone if action == "create" else "UTC"
    partition = partition_event(event)

    fields: FormFields = [
        ("sessionTitle", event.title),
        ("date", format_session_date(event.start_time, tz_name)),
        ("startTime", format_session_time(event.start_time, tz_name)),
        ("endTime", format_session_time(event.end_time, tz_name)),
        ("timeZone", event.organizer.time_zone),
        ("stage", partition.stage),
        ("viewer", partition.viewer),
    ]
    if show_id:
        fields.append(("showID", show_id))
    return fields


def build_session_body(
    event: CalendarEvent,
    action: Action,
    show_id: Optional[str] = None,
) -> str:
    return encode_form(build_session_fields(event, action, show_id))
