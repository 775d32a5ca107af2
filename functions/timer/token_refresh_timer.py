"""
Token Refresh Timer
Scheduled job that logs in to the partner API and stores the bearer token in Key Vault
"""

import logging
from datetime import datetime

import azure.functions as func

from shared.config import load_monitor_config
from shared.keyvault import KeyVaultClient
from shared.services.partner_client import PartnerApiClient
from shared.services.token_refresher import TokenRefresher

logger = logging.getLogger(__name__)

# Create blueprint for timer function
bp = func.Blueprint()


@bp.function_name("Login-SetToken")
@bp.timer_trigger(schedule="0 */45 * * * *", arg_name="timer", run_on_startup=False)
async def login_set_token(timer: func.TimerRequest) -> None:
    """
    Timer trigger that refreshes the partner bearer token every 45 minutes

    Schedule: "0 */45 * * * *" = minute 0 and 45 of every hour, which keeps
    the interval at or below the 45 minute token TTL.

    Errors propagate so the runtime records the invocation as failed.
    """
    logger.info(f"Token refresh timer triggered at: {datetime.now()}")

    if timer.past_due:
        logger.warning("Token refresh timer is running late")

    config = load_monitor_config()
    partner_client = PartnerApiClient(timeout=config.http_timeout_seconds)

    async with KeyVaultClient(config.key_vault_url) as keyvault:
        refresher = TokenRefresher(config, keyvault, partner_client)
        await refresher.refresh_token()

    logger.info("Token refresh timer completed")
