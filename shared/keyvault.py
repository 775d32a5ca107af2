"""
Azure Key Vault client wrapper for the bearer token secret.

Reads the current token (with its expiry) for the probe and writes refreshed
tokens for the token refresher. Azure SDK errors are translated into
CredentialStoreError so callers only handle one type.

All methods are async and must be called with await.
"""

import logging
from datetime import datetime

from azure.core.exceptions import (
    AzureError,
    HttpResponseError,
    ResourceNotFoundError,
)
from azure.identity.aio import DefaultAzureCredential
from azure.keyvault.secrets.aio import SecretClient

from shared.errors import CredentialStoreError
from shared.models import Credential

logger = logging.getLogger(__name__)


class KeyVaultClient:
    """
    Async Key Vault secret store.

    Features:
    - DefaultAzureCredential for automatic authentication
    - Read a secret value together with its expiry
    - Write a secret value and update its expiry
    """

    def __init__(self, vault_url: str):
        """
        Initialize the Key Vault client.

        Args:
            vault_url: Azure Key Vault URL (e.g., https://my-vault.vault.azure.net/)
        """
        if not vault_url:
            raise ValueError("Key Vault URL is required")

        self.vault_url = vault_url
        self._credential = DefaultAzureCredential()
        self._client = SecretClient(vault_url=self.vault_url, credential=self._credential)
        logger.info(f"Key Vault client initialized for {self.vault_url}")

    async def get_credential(self, name: str) -> Credential:
        """
        Get a secret value and its expiry.

        Args:
            name: Secret name

        Returns:
            Credential with token and expires_on

        Raises:
            CredentialStoreError: If the secret is missing, empty or the vault is unreachable
        """
        try:
            secret = await self._client.get_secret(name)
        except ResourceNotFoundError:
            raise CredentialStoreError(f"Secret not found: {name}") from None
        except HttpResponseError as e:
            if e.status_code == 403:
                raise CredentialStoreError(
                    f"Permission denied reading secret {name} from Key Vault"
                ) from e
            raise CredentialStoreError(f"Key Vault error reading {name}: {e}") from e
        except AzureError as e:
            raise CredentialStoreError(f"Key Vault unreachable reading {name}: {e}") from e

        if not secret.value:
            raise CredentialStoreError(f"Secret {name} has no value")

        logger.info(f"Retrieved secret: {name}")
        return Credential(token=secret.value, expires_on=secret.properties.expires_on)

    async def set_secret(self, name: str, value: str) -> None:
        """
        Set a secret (creates a new version if it exists).

        Raises:
            CredentialStoreError: If the write fails
        """
        try:
            await self._client.set_secret(name, value)
        except HttpResponseError as e:
            if e.status_code == 403:
                raise CredentialStoreError(
                    f"Permission denied writing secret {name} to Key Vault"
                ) from e
            raise CredentialStoreError(f"Key Vault error writing {name}: {e}") from e
        except AzureError as e:
            raise CredentialStoreError(f"Key Vault unreachable writing {name}: {e}") from e
        logger.info(f"Set secret: {name}")

    async def set_secret_expiry(self, name: str, expires_on: datetime) -> None:
        """
        Update the expiry attribute of the latest secret version.

        Raises:
            CredentialStoreError: If the update fails
        """
        try:
            await self._client.update_secret_properties(name, expires_on=expires_on)
        except ResourceNotFoundError:
            raise CredentialStoreError(f"Secret not found: {name}") from None
        except AzureError as e:
            raise CredentialStoreError(f"Failed to set expiry on {name}: {e}") from e
        logger.info(f"Set expiry on secret {name} to {expires_on.isoformat()}")

    async def close(self):
        """Close the Key Vault client and release resources."""
        await self._client.close()
        await self._credential.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
