"""Errors raised by the SquadCast integration."""

from __future__ import annotations

from typing import Optional


class SquadcastError(Exception):
    """Base class for integration errors."""


class AuthenticationError(SquadcastError):
    """No authenticated caller is attached to the request."""


class NotInstalledError(SquadcastError):
    """No SquadCast credential exists for the requested user or team."""


class InvalidCredentialError(SquadcastError):
    """Stored key material is malformed or was rejected by SquadCast."""


class ProviderRequestFailure(SquadcastError):
    """SquadCast answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(SquadcastError):
    """A SquadCast response is missing required fields."""
