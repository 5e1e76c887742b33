from __future__ import annotations

from cookiecard.modules.security.adapters.fernet_encryptor import CredentialEncryption
from cookiecard.modules.security.domain.ports import SecretsVaultPort


class FernetSecretsVaultAdapter(SecretsVaultPort):
    """Vault adapter backed by the Fernet encryption key from env."""

    def __init__(self, key: str | None = None) -> None:
        self._encryptor = CredentialEncryption(key)

    def encrypt(self, plaintext: str) -> str:
        return self._encryptor.encrypt(plaintext)

    def decrypt(self, ciphertext: str) -> str:
        return self._encryptor.decrypt(ciphertext)


_vault: FernetSecretsVaultAdapter | None = None


def get_secrets_vault() -> SecretsVaultPort:
    global _vault
    if _vault is None:
        _vault = FernetSecretsVaultAdapter()
    return _vault
