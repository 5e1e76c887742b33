from cookiecard.modules.security.adapters.fernet_vault import FernetSecretsVaultAdapter, get_secrets_vault
from cookiecard.modules.security.domain.ports import SecretsVaultPort

__all__ = ["FernetSecretsVaultAdapter", "SecretsVaultPort", "get_secrets_vault"]
