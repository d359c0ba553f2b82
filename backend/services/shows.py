"""SquadCast show listing and event type show bindings."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select

from backend.models.show_binding import ShowBinding
from backend.services.cache import cache_delete, cache_get, cache_set
from backend.services.credentials import resolve_api_key
from backend.services.db import get_session
from backend.utils.config import get_settings
from video_service.models import CalendarEvent
from video_service.squadcast_client import SquadcastClient

LOGGER = logging.getLogger(__name__)
SHOWS_CACHE_PREFIX = "squadcast:shows:"


def _shows_cache_key(user_id: Optional[int], team_id: Optional[int]) -> str:
    if team_id is not None:
        return f"{SHOWS_CACHE_PREFIX}team:{team_id}"
    return f"{SHOWS_CACHE_PREFIX}user:{user_id}"


def list_shows(
    caller_user_id: int,
    team_id: Optional[int] = None,
) -> List[Tuple[str, str]]:
    """Return ``(show id, show name)`` pairs for the installed credential.

    Later duplicates of a show id overwrite the name but keep the first
    position, matching insertion into an ordered mapping.
    """

    api_key = resolve_api_key(caller_user_id, team_id)
    cache_key = _shows_cache_key(caller_user_id, team_id)

    cached = cache_get(cache_key)
    if cached is not None:
        try:
            return [(show_id, name) for show_id, name in json.loads(cached)]
        except (json.JSONDecodeError, TypeError, ValueError):
            LOGGER.warning("Shows cache entry %s invalid JSON; refetching", cache_key)

    settings = get_settings()
    client = SquadcastClient(
        api_key=api_key,
        base_url=settings.squadcast_api_url,
        timeout_seconds=settings.squadcast_timeout_seconds,
    )

    show_map = {}
    for show in client.list_shows():
        show_map[show.show_id] = show.show_details.show_name
    shows = list(show_map.items())

    if settings.shows_cache_ttl_seconds:
        cache_set(cache_key, json.dumps(shows), ex=settings.shows_cache_ttl_seconds)
    LOGGER.debug("Fetched %s SquadCast shows for %s", len(shows), cache_key)
    return shows


def invalidate_shows_cache(user_id: Optional[int], team_id: Optional[int] = None) -> None:
    cache_delete(_shows_cache_key(user_id, team_id))


def get_show_id(event_type_id: int, user_id: int) -> Optional[str]:
    with get_session() as session:
        binding = session.execute(
            select(ShowBinding).where(
                ShowBinding.event_type_id == event_type_id,
                ShowBinding.user_id == user_id,
            )
        ).scalars().first()
        return binding.show_id if binding else None


def find_show_id(event: CalendarEvent) -> Optional[str]:
    """Return the show bound to the event's type, if the organizer picked one."""

    if event.event_type_id is None or event.organizer.id is None:
        return None
    return get_show_id(event.event_type_id, event.organizer.id)


def bind_show(event_type_id: int, user_id: int, show_id: Optional[str]) -> Optional[str]:
    """Bind ``show_id`` to an event type, or clear the binding when it is empty."""

    with get_session() as session:
        binding = session.execute(
            select(ShowBinding).where(
                ShowBinding.event_type_id == event_type_id,
                ShowBinding.user_id == user_id,
            )
        ).scalars().first()

        if not show_id:
            if binding is not None:
                session.delete(binding)
            LOGGER.info("Cleared show binding for event_type_id=%s", event_type_id)
            return None

        if binding is None:
            session.add(
                ShowBinding(event_type_id=event_type_id, user_id=user_id, show_id=show_id)
            )
        else:
            binding.show_id = show_id
            binding.updated_at = datetime.utcnow()

    LOGGER.info("Bound show %s to event_type_id=%s", show_id, event_type_id)
    return show_id
