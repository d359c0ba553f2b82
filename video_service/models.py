"""Typed inputs and outputs of the SquadCast adapter."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Immutable model that also accepts the host platform's camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Organizer(_CamelModel):
    id: Optional[int] = None
    email: str
    name: Optional[str] = None
    time_zone: str

    @field_validator("time_zone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone {value!r}") from exc
        return value


class Attendee(_CamelModel):
    email: str
    name: Optional[str] = None
    time_zone: Optional[str] = None


class TeamMember(_CamelModel):
    email: str
    name: Optional[str] = None


class Team(_CamelModel):
    name: Optional[str] = None
    members: List[TeamMember] = Field(default_factory=list)


class CalendarEvent(_CamelModel):
    """Booking description handed to the adapter for every lifecycle call."""

    title: str
    start_time: datetime
    end_time: datetime
    organizer: Organizer
    attendees: List[Attendee] = Field(default_factory=list)
    # Emails of attendees added as guests; they only ever get viewer seats.
    guests: List[str] = Field(default_factory=list)
    team: Optional[Team] = None
    event_type_id: Optional[int] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PartialReference(_CamelModel):
    """Meeting fields previously stored on a booking."""

    meeting_id: Optional[str] = None
    meeting_password: Optional[str] = None
    meeting_url: Optional[str] = None


class VideoCallData(BaseModel):
    """Normalized meeting descriptor returned to the booking engine."""

    model_config = ConfigDict(frozen=True)

    type: str
    id: str
    password: str
    url: str

    @property
    def is_empty(self) -> bool:
        return not (self.type or self.id or self.password or self.url)


EMPTY_VIDEO_CALL_DATA = VideoCallData(type="", id="", password="", url="")


class SessionCreated(BaseModel):
    kind: Literal["created"] = "created"
    meeting: VideoCallData


class SessionRejected(BaseModel):
    kind: Literal["rejected"] = "rejected"
    status_code: Optional[int] = None
    reason: str


SessionResult = Annotated[Union[SessionCreated, SessionRejected], Field(discriminator="kind")]


class StageViewerPartition(BaseModel):
    stage: List[str] = Field(default_factory=list)
    viewer: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Provider response shapes
# ---------------------------------------------------------------------------
class _ProviderModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreatedSession(_ProviderModel):
    session_id: str = Field(alias="sessionID")
    show_id: str = Field(alias="showID")


class ShowDetails(_ProviderModel):
    show_name: str = Field(alias="showName")


class Show(_ProviderModel):
    show_id: str = Field(alias="showID")
    show_details: ShowDetails = Field(alias="showDetails")


class Recording(_ProviderModel):
    """A recorded take attached to a session."""

    recording_id: str = Field(alias="recordingID")


class RecordingStatus(_ProviderModel):
    """Placeholder entry returned while a session has no recording."""

    status: str


# Presence of ``recordingID`` decides the variant, so Recording is tried first.
RecordingEntry = Annotated[
    Union[Recording, RecordingStatus],
    Field(union_mode="left_to_right"),
]

SHOWS_ADAPTER: TypeAdapter[List[Show]] = TypeAdapter(List[Show])
RECORDINGS_ADAPTER: TypeAdapter[List[RecordingEntry]] = TypeAdapter(List[RecordingEntry])
