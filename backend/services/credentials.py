"""Lookup, validation and decryption of installed SquadCast credentials."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from backend.models.credential import Credential
from backend.services.crypto import DecryptionError, symmetric_decrypt, symmetric_encrypt
from backend.services.db import get_session
from video_service.exceptions import (
    AuthenticationError,
    InvalidCredentialError,
    NotInstalledError,
)
from video_service.metadata import APP_SLUG, APP_TYPE

LOGGER = logging.getLogger(__name__)


class StoredKey(BaseModel):
    """Shape of ``Credential.key`` for this app."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(alias="apiKey")


def find_credential(
    session: Session,
    *,
    user_id: Optional[int],
    team_id: Optional[int] = None,
) -> Optional[Credential]:
    """Return the active credential for a team, or for the user when no team is given."""

    stmt = select(Credential).where(
        Credential.type == APP_TYPE,
        Credential.invalid.is_(False),
    )
    if team_id is not None:
        stmt = stmt.where(Credential.team_id == team_id)
    else:
        stmt = stmt.where(Credential.user_id == user_id)
    return session.execute(stmt.order_by(Credential.id.desc()).limit(1)).scalars().first()


def decrypt_credential_key(credential: Credential) -> str:
    """Validate the stored key blob and return the plaintext API key."""

    if not credential.key:
        raise InvalidCredentialError(f"credential {credential.id} has no key material")

    try:
        stored = StoredKey.model_validate(credential.key)
    except ValidationError as exc:
        raise InvalidCredentialError(
            f"credential {credential.id} key does not match the expected schema"
        ) from exc

    try:
        api_key = symmetric_decrypt(stored.api_key)
    except DecryptionError as exc:
        raise InvalidCredentialError(
            f"credential {credential.id} could not be decrypted"
        ) from exc

    if not api_key:
        raise InvalidCredentialError(f"credential {credential.id} holds an empty key")
    return api_key


def resolve_api_key(caller_user_id: Optional[int], team_id: Optional[int] = None) -> str:
    """Return the decrypted API key installed for the team or the caller."""

    if caller_user_id is None and team_id is None:
        raise AuthenticationError("no caller to look up a credential for")

    with get_session() as session:
        credential = find_credential(session, user_id=caller_user_id, team_id=team_id)
        if credential is None:
            LOGGER.info(
                "No %s credential: user_id=%s team_id=%s",
                APP_SLUG,
                caller_user_id,
                team_id,
            )
            raise NotInstalledError("You must install the app first")
        return decrypt_credential_key(credential)


def store_credential(api_key: str, *, user_id: int, team_id: Optional[int] = None) -> int:
    """Encrypt ``api_key`` and persist it for a team install or a personal install.

    Earlier active credentials of the same owner are flagged ``invalid`` in the
    same transaction, so an owner never holds more than one active credential.
    """

    owner_user_id = None if team_id is not None else user_id
    credential = Credential(
        type=APP_TYPE,
        app_id=APP_SLUG,
        key={"apiKey": symmetric_encrypt(api_key)},
        user_id=owner_user_id,
        team_id=team_id,
        invalid=False,
    )

    previous = update(Credential).where(
        Credential.type == APP_TYPE,
        Credential.invalid.is_(False),
    )
    if team_id is not None:
        previous = previous.where(Credential.team_id == team_id)
    else:
        previous = previous.where(
            Credential.user_id == owner_user_id,
            Credential.team_id.is_(None),
        )

    with get_session() as session:
        replaced = session.execute(
            previous.values(invalid=True).execution_options(synchronize_session=False)
        ).rowcount
        session.add(credential)
        session.flush()
        credential_id = credential.id

    LOGGER.info(
        "Stored %s credential id=%s user_id=%s team_id=%s replaced=%s",
        APP_SLUG,
        credential_id,
        owner_user_id,
        team_id,
        replaced,
    )
    return credential_id
