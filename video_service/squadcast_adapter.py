"""SquadCast video meeting adapter."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

import httpx

from backend.models.credential import Credential
from backend.services.credentials import decrypt_credential_key
from backend.services.shows import find_show_id
from backend.utils.config import Settings, get_settings
from video_service.base import VideoApiAdapter
from video_service.exceptions import ProviderRequestFailure
from video_service.metadata import APP_TYPE
from video_service.models import (
    EMPTY_VIDEO_CALL_DATA,
    CalendarEvent,
    PartialReference,
    Recording,
    SessionCreated,
    SessionRejected,
    SessionResult,
    VideoCallData,
)
from video_service.payload import build_session_body
from video_service.squadcast_client import SquadcastClient

LOGGER = logging.getLogger(__name__)

ShowLookup = Callable[[CalendarEvent], Optional[str]]


class SquadcastVideoAdapter(VideoApiAdapter):
    """Manages the SquadCast session behind a single booking."""

    def __init__(
        self,
        credential: Credential,
        *,
        show_lookup: Optional[ShowLookup] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.credential = credential
        self._show_lookup = show_lookup or find_show_id
        self._settings = settings or get_settings()
        self._transport = transport

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def get_availability(self) -> List[Any]:
        return []

    def create_session(self, event: CalendarEvent) -> SessionResult:
        """Create a session and report whether SquadCast accepted it."""

        client = self._client()
        body = build_session_body(event, "create", show_id=self._show_lookup(event))

        try:
            created = client.create_session(body)
        except ProviderRequestFailure as exc:
            LOGGER.warning(
                "SquadCast session create rejected: status=%s error=%s",
                exc.status_code,
                exc,
            )
            return SessionRejected(status_code=exc.status_code, reason=str(exc))

        LOGGER.info(
            "SquadCast session created: session_id=%s show_id=%s",
            created.session_id,
            created.show_id,
        )
        return SessionCreated(
            meeting=VideoCallData(
                type=APP_TYPE,
                id=created.session_id,
                password="",
                url=self._studio_url(created.show_id, created.session_id),
            )
        )

    def create_meeting(self, event: CalendarEvent) -> VideoCallData:
        """Create a session, returning the empty descriptor when SquadCast refuses.

        A refusal does not raise so the booking can go ahead without a link.
        Use :meth:`create_session` to tell the two outcomes apart.
        """

        result = self.create_session(event)
        if isinstance(result, SessionCreated):
            return result.meeting
        return EMPTY_VIDEO_CALL_DATA

    def update_meeting(
        self,
        booking_ref: PartialReference,
        event: CalendarEvent,
    ) -> VideoCallData:
        """Push booking changes to the existing session.

        SquadCast's update response carries nothing usable, so the stored
        reference is returned as is.
        """

        if not booking_ref.meeting_id:
            return EMPTY_VIDEO_CALL_DATA

        client = self._client()
        body = build_session_body(event, "update", show_id=self._show_lookup(event))

        try:
            client.update_session(booking_ref.meeting_id, body)
        except ProviderRequestFailure as exc:
            LOGGER.warning(
                "SquadCast session update failed: session_id=%s status=%s error=%s",
                booking_ref.meeting_id,
                exc.status_code,
                exc,
            )

        return VideoCallData(
            type=APP_TYPE,
            id=booking_ref.meeting_id,
            password=booking_ref.meeting_password or "",
            url=booking_ref.meeting_url or "",
        )

    def delete_meeting(self, meeting_id: str) -> None:
        """Delete the session unless something has already been recorded."""

        client = self._client()

        try:
            recordings = client.list_recordings(meeting_id)
        except ProviderRequestFailure as exc:
            LOGGER.warning(
                "Keeping SquadCast session %s: recordings check failed: %s",
                meeting_id,
                exc,
            )
            return

        # Only the first entry is documented to tell whether a take exists.
        # TODO: confirm with SquadCast that a status entry never precedes a recording.
        if recordings and isinstance(recordings[0], Recording):
            LOGGER.info(
                "Keeping SquadCast session %s: recording %s exists",
                meeting_id,
                recordings[0].recording_id,
            )
            return

        try:
            client.delete_session(meeting_id)
        except ProviderRequestFailure as exc:
            LOGGER.warning(
                "SquadCast session delete failed: session_id=%s status=%s error=%s",
                meeting_id,
                exc.status_code,
                exc,
            )
            return

        LOGGER.info("SquadCast session deleted: session_id=%s", meeting_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _client(self) -> SquadcastClient:
        return SquadcastClient(
            api_key=decrypt_credential_key(self.credential),
            base_url=self._settings.squadcast_api_url,
            timeout_seconds=self._settings.squadcast_timeout_seconds,
            transport=self._transport,
        )

    def _studio_url(self, show_id: str, session_id: str) -> str:
        base = self._settings.squadcast_app_url.rstrip("/")
        return f"{base}/studio/{show_id}/session/{session_id}"
