"""SquadCast app install, show listing and show binding endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError

from backend.services.credentials import store_credential
from backend.services.shows import bind_show, invalidate_shows_cache, list_shows
from backend.utils.config import get_settings
from video_service.exceptions import (
    AuthenticationError,
    InvalidCredentialError,
    MalformedResponseError,
    NotInstalledError,
    ProviderRequestFailure,
)
from video_service.metadata import APP_NAME, METADATA, installed_app_path, setup_path
from video_service.squadcast_client import SquadcastClient

LOGGER = logging.getLogger(__name__)

router = APIRouter()


class InstallRequest(BaseModel):
    """Key submitted from the setup page."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(alias="apiKey")
    team_id: Optional[int] = Field(default=None, alias="teamId")


class AppUrlResponse(BaseModel):
    url: str


class ShowsResponse(BaseModel):
    shows: List[Tuple[str, str]]


class ShowBindingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    show_id: Optional[str] = Field(default=None, alias="showId")


class ShowBindingResponse(BaseModel):
    event_type_id: int
    show_id: Optional[str]


def get_caller_user_id(x_user_id: Optional[int] = Header(default=None)) -> int:
    """Return the user id placed on the request by the session middleware."""

    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You must be logged in to do this",
        )
    return x_user_id


def _provider_client(api_key: str) -> SquadcastClient:
    settings = get_settings()
    return SquadcastClient(
        api_key=api_key,
        base_url=settings.squadcast_api_url,
        timeout_seconds=settings.squadcast_timeout_seconds,
    )


@router.get("/add", response_model=AppUrlResponse)
def get_setup_url(
    team_id: Optional[int] = Query(default=None, alias="teamId"),
    user_id: int = Depends(get_caller_user_id),
) -> AppUrlResponse:
    """Point the caller at the key setup page."""

    return AppUrlResponse(url=setup_path(team_id))


@router.post("/add", response_model=AppUrlResponse)
def install(
    payload: InstallRequest,
    user_id: int = Depends(get_caller_user_id),
) -> AppUrlResponse:
    """Validate a SquadCast API key and store it encrypted."""

    try:
        _provider_client(payload.api_key).verify_api_key()
    except InvalidCredentialError as exc:
        LOGGER.error("Invalid %s API key for user_id=%s: %s", APP_NAME, user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid API key",
        ) from exc

    try:
        store_credential(payload.api_key, user_id=user_id, team_id=payload.team_id)
    except SQLAlchemyError as exc:
        LOGGER.error("Could not add %s account for user_id=%s: %s", APP_NAME, user_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Could not add this {APP_NAME} account",
        ) from exc

    invalidate_shows_cache(user_id, payload.team_id)
    return AppUrlResponse(url=installed_app_path())


@router.get("/shows", response_model=ShowsResponse)
def get_shows(
    team_id: Optional[int] = Query(default=None, alias="teamId"),
    user_id: int = Depends(get_caller_user_id),
) -> ShowsResponse:
    """List the shows available to the installed team or personal credential."""

    try:
        shows = list_shows(user_id, team_id)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You must be logged in to do this",
        ) from exc
    except NotInstalledError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must install the app first",
        ) from exc
    except (InvalidCredentialError, ProviderRequestFailure, MalformedResponseError) as exc:
        LOGGER.error("Could not fetch %s shows: %s", APP_NAME, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Could not fetch data from {APP_NAME}",
        ) from exc

    return ShowsResponse(shows=shows)


@router.put("/event-types/{event_type_id}/show", response_model=ShowBindingResponse)
def put_show_binding(
    event_type_id: int,
    payload: ShowBindingRequest,
    user_id: int = Depends(get_caller_user_id),
) -> ShowBindingResponse:
    """Choose the show new sessions for an event type are created in."""

    show_id = bind_show(event_type_id, user_id, payload.show_id)
    return ShowBindingResponse(event_type_id=event_type_id, show_id=show_id)


@router.get("/metadata")
def get_metadata() -> Dict[str, Any]:
    """Describe the app and the meeting location it adds to event types."""

    return METADATA
