"""SquadCast REST API client."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, TypeVar

import httpx
from pydantic import ValidationError

from video_service.exceptions import (
    InvalidCredentialError,
    MalformedResponseError,
    ProviderRequestFailure,
)
from video_service.models import (
    RECORDINGS_ADAPTER,
    SHOWS_ADAPTER,
    CreatedSession,
    RecordingEntry,
    Show,
)

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


class SquadcastClient:
    """Thin wrapper around the SquadCast ``/v2`` endpoints.

    Every call opens a short-lived ``httpx.Client`` carrying the bearer key.
    Transport problems and unexpected statuses surface as
    :class:`ProviderRequestFailure`; bodies that do not match the documented
    shape surface as :class:`MalformedResponseError`.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.squadcast.fm/v2",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not api_key:
            raise InvalidCredentialError("SquadCast API key is empty")
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def verify_api_key(self) -> None:
        """Probe the organizations endpoint; any non-2xx means a bad key."""

        try:
            response = self._request("GET", "/organizations")
        except ProviderRequestFailure as exc:
            raise InvalidCredentialError("Invalid API key") from exc

        if not response.is_success:
            LOGGER.info("SquadCast rejected API key: status=%s", response.status_code)
            raise InvalidCredentialError("Invalid API key")

    def list_shows(self) -> List[Show]:
        response = self._request("GET", "/shows")
        self._ensure_success(response, "list shows")
        return self._parse(SHOWS_ADAPTER.validate_python, response, "shows")

    def create_session(self, body: str) -> CreatedSession:
        response = self._request(
            "POST",
            "/sessions",
            content=body,
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
        # Only a plain 200 carries a session body.
        if response.status_code != 200:
            raise ProviderRequestFailure(
                f"SquadCast refused session create: {response.status_code}",
                status_code=response.status_code,
            )
        return self._parse(CreatedSession.model_validate, response, "session")

    def update_session(self, session_id: str, body: str) -> None:
        response = self._request(
            "PUT",
            f"/sessions/{session_id}",
            content=body,
            headers={"Content-Type": FORM_CONTENT_TYPE},
        )
        self._ensure_success(response, "update session")

    def list_recordings(self, session_id: str) -> List[RecordingEntry]:
        response = self._request("GET", f"/sessions/{session_id}/recordings")
        self._ensure_success(response, "list recordings")
        return self._parse(RECORDINGS_ADAPTER.validate_python, response, "recordings")

    def delete_session(self, session_id: str) -> None:
        response = self._request("DELETE", f"/sessions/{session_id}")
        self._ensure_success(response, "delete session")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _http_client(self) -> httpx.Client:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        return httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            with self._http_client() as client:
                response = client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ProviderRequestFailure(
                f"SquadCast request {method} {path} failed: {exc}"
            ) from exc

        LOGGER.debug(
            "SquadCast %s %s -> %s",
            method,
            path,
            response.status_code,
        )
        return response

    @staticmethod
    def _ensure_success(response: httpx.Response, operation: str) -> None:
        if not response.is_success:
            raise ProviderRequestFailure(
                f"SquadCast could not {operation}: {response.status_code}",
                status_code=response.status_code,
            )

    @staticmethod
    def _parse(validator: Callable[[Any], T], response: httpx.Response, what: str) -> T:
        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponseError(f"SquadCast {what} response is not JSON") from exc

        try:
            return validator(payload)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"SquadCast {what} response has an unexpected shape: {exc}"
            ) from exc
