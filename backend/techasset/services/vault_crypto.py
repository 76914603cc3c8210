# Overview: Symmetric encryption for password vault secrets at rest.

"""
Vault Crypto

SECURITY: Vault passwords, custom field values and secure note bodies are
encrypted with Fernet before they are written. The key comes from
VAULT_KEY, or is derived from SECRET_KEY when VAULT_KEY is not configured.
Rotating either key makes existing ciphertext unreadable.
"""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app


class VaultDecryptionError(Exception):
    """Raised when stored ciphertext cannot be decrypted with the current key."""
    pass


def _fernet() -> Fernet:
    key = current_app.config.get("VAULT_KEY")
    if key:
        return Fernet(key.encode() if isinstance(key, str) else key)
    secret = current_app.config["SECRET_KEY"]
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def encrypt(plaintext: str) -> str:
    return _fernet().encrypt(plaintext.encode("utf-8")).decode("ascii")


def decrypt(token: str | None) -> str | None:
    if token is None:
        return None
    try:
        return _fernet().decrypt(token.encode("ascii")).decode("utf-8")
    except InvalidToken as exc:
        raise VaultDecryptionError("Stored secret cannot be decrypted with the configured key") from exc
