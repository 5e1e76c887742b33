"""Encryption utilities for storing workspace access tokens."""
from cryptography.fernet import Fernet, InvalidToken

from cookiecard.errors import CookieCardError
from cookiecard.shared.infrastructure.settings import get_settings


class CredentialEncryption:
    """Encrypt/decrypt Notion access tokens."""

    def __init__(self, key: str | None = None):
        key = key or get_settings().encryption_key
        if not key:
            raise ValueError("ENCRYPTION_KEY not set in environment")
        self.cipher = Fernet(key.encode() if isinstance(key, str) else key)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string."""
        return self.cipher.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a string."""
        try:
            return self.cipher.decrypt(ciphertext.encode()).decode()
        except InvalidToken as exc:
            raise CookieCardError(
                status_code=500,
                code="credential_decrypt_failed",
                message="Stored credential could not be decrypted",
            ) from exc
