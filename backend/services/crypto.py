"""Symmetric encryption of stored provider secrets."""

from __future__ import annotations

from cryptography.fernet import Fernet, InvalidToken

from backend.utils.config import get_settings


class DecryptionError(ValueError):
    """Raised when a ciphertext cannot be decrypted with the configured key."""


def _fernet(secret: str | None = None) -> Fernet:
    key = secret if secret is not None else get_settings().encryption_key
    return Fernet(key.encode("utf-8"))


def symmetric_encrypt(plaintext: str, secret: str | None = None) -> str:
    """Encrypt ``plaintext`` with the deployment secret."""

    return _fernet(secret).encrypt(plaintext.encode("utf-8")).decode("utf-8")


def symmetric_decrypt(ciphertext: str, secret: str | None = None) -> str:
    """Decrypt a value produced by :func:`symmetric_encrypt`."""

    try:
        return _fernet(secret).decrypt(ciphertext.encode("utf-8")).decode("utf-8")
    except InvalidToken as exc:
        raise DecryptionError("ciphertext does not match the configured key") from exc
