"""
Token Refresher
Logs in to the partner API and stores the bearer token in Key Vault
"""

import logging
from datetime import datetime, timedelta, timezone

from shared.config import MonitorConfig
from shared.errors import MonitorError
from shared.keyvault import KeyVaultClient
from shared.models import Credential
from shared.services.partner_client import PartnerApiClient

logger = logging.getLogger(__name__)


class TokenRefresher:
    """
    Refreshes the partner bearer token

    Process:
    1. Password-grant login against the configured login URL
    2. Write the token to the configured Key Vault secret
    3. Set the secret expiry to now + token TTL (45 minutes by default)

    Single attempt per call. Failures are logged and re-raised.
    """

    def __init__(
        self,
        config: MonitorConfig,
        secret_store: KeyVaultClient,
        partner_client: PartnerApiClient
    ):
        self.config = config
        self.secret_store = secret_store
        self.partner_client = partner_client

    async def refresh_token(self) -> Credential:
        """
        Fetch a new token and overwrite the stored credential

        Returns:
            The Credential that was written

        Raises:
            AuthError: If the login call fails or returns no token
            CredentialStoreError: If the Key Vault write fails
        """
        try:
            token = await self.partner_client.request_password_token(
                self.config.login_url,
                self.config.username,
                self.config.password,
            )

            expires_on = datetime.now(timezone.utc) + timedelta(minutes=self.config.token_ttl_minutes)
            await self.secret_store.set_secret(self.config.secret_name, token)
            await self.secret_store.set_secret_expiry(self.config.secret_name, expires_on)
        except MonitorError as e:
            logger.error(f"Token not set: {e}", exc_info=True)
            raise

        logger.info(f"Token stored in {self.config.secret_name}, expires at {expires_on.isoformat()}")
        return Credential(token=token, expires_on=expires_on)
