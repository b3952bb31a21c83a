"""Encryption helpers for stored Shopify access tokens."""

import base64
import hashlib
from functools import lru_cache

from cryptography.fernet import Fernet

from store_locator.core.config import settings


@lru_cache(maxsize=1)
def _get_fernet() -> Fernet:
    """Build the Fernet instance from the configured encryption key.

    The configured key may be any string; SHA-256 of it is used as the
    32-byte Fernet key. Rotating encryption_key makes stored tokens
    undecryptable, so shops must be re-registered afterwards.
    """
    key_bytes = hashlib.sha256(settings.encryption_key.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(key_bytes))


def encrypt_access_token(token: str) -> str:
    """Encrypt an Admin API access token for storage."""
    return _get_fernet().encrypt(token.encode()).decode()


def decrypt_access_token(encrypted: str) -> str:
    """Decrypt a stored Admin API access token.

    Raises:
        cryptography.fernet.InvalidToken: If the value was not produced with
            the current encryption key.
    """
    return _get_fernet().decrypt(encrypted.encode()).decode()
