"""Static description of the SquadCast conferencing app."""

from typing import Any, Dict, Optional

APP_SLUG = "squadcast"
APP_NAME = "SquadCast"
APP_TYPE = "squadcast_video"
APP_VARIANT = "conferencing"
APP_URL = "https://squadcast.fm"

METADATA: Dict[str, Any] = {
    "name": APP_NAME,
    "slug": APP_SLUG,
    "type": APP_TYPE,
    "variant": APP_VARIANT,
    "categories": ["conferencing"],
    "url": APP_URL,
    "is_global": False,
    "extends_feature": "EventType",
    "concurrent_meetings": True,
    "location": {
        "default": False,
        "link_type": "dynamic",
        "type": f"integrations:{APP_TYPE}",
        "label": APP_NAME,
    },
}


def setup_path(team_id: Optional[int] = None) -> str:
    """Return the path of the key setup page."""

    path = f"/apps/{APP_SLUG}/setup"
    if team_id:
        path = f"{path}?teamId={team_id}"
    return path


def installed_app_path() -> str:
    """Return the path the host redirects to after a successful install."""

    return f"/apps/installed/{APP_VARIANT}?hl={APP_SLUG}"
