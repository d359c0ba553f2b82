"""Contract shared by every video conferencing adapter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List

from video_service.models import CalendarEvent, PartialReference, VideoCallData


class VideoApiAdapter(ABC):
    """Operations the booking engine calls on a conferencing provider."""

    @abstractmethod
    def get_availability(self) -> List[Any]:
        """Return busy periods known to the provider."""

    @abstractmethod
    def create_meeting(self, event: CalendarEvent) -> VideoCallData:
        """Create a meeting for a new booking."""

    @abstractmethod
    def update_meeting(
        self,
        booking_ref: PartialReference,
        event: CalendarEvent,
    ) -> VideoCallData:
        """Apply booking changes to an existing meeting."""

    @abstractmethod
    def delete_meeting(self, meeting_id: str) -> None:
        """Remove the meeting attached to a cancelled booking."""
