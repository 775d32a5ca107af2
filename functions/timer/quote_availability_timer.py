"""
Quote Availability Timer
Runs the synthetic quote availability test once per minute
"""

import logging
from datetime import datetime

import azure.functions as func

from shared.async_storage import AsyncTableStorageService
from shared.config import load_monitor_config
from shared.keyvault import KeyVaultClient
from shared.services.availability_probe import AvailabilityProbe, report_failed_run
from shared.services.fixture_store import FixtureStore
from shared.services.partner_client import PartnerApiClient
from shared.services.token_refresher import TokenRefresher
from shared.telemetry import TelemetrySink

logger = logging.getLogger(__name__)

# Create blueprint for timer function
bp = func.Blueprint()


@bp.function_name("Quote-Availability-Monitor")
@bp.timer_trigger(schedule="0 */1 * * * *", arg_name="timer", run_on_startup=False)
async def quote_availability_monitor(timer: func.TimerRequest) -> None:
    """
    Timer trigger that probes the quote API every minute

    Every run reports exactly one availability result to Application Insights,
    whichever step fails, including opening the Key Vault and table clients.
    A 401 from the quote API also triggers a token refresh. Configuration
    errors propagate; without config there is no instrumentation key.
    """
    logger.info(f"Quote-Availability-Monitor started at: {datetime.now()}")

    if timer.past_due:
        logger.warning("Quote-Availability-Monitor timer is running late")

    config = load_monitor_config()
    partner_client = PartnerApiClient(timeout=config.http_timeout_seconds)
    telemetry = TelemetrySink(config.instrumentation_key)

    result = None
    try:
        async with KeyVaultClient(config.key_vault_url) as keyvault, \
                AsyncTableStorageService(config.fixture_table_name, config.fixture_connection_string) as table:
            probe = AvailabilityProbe(
                config=config,
                secret_store=keyvault,
                fixture_store=FixtureStore(table, config.fixture_partition_key),
                partner_client=partner_client,
                telemetry=telemetry,
                token_refresher=TokenRefresher(config, keyvault, partner_client),
            )
            result = await probe.run_probe()
    except Exception as e:
        if result is None:
            result = await report_failed_run(config, telemetry, e)
        else:
            logger.warning(f"Error closing clients after availability test {result.operation_id}: {e}")

    logger.info(
        f"Quote-Availability-Monitor ended at: {datetime.now()} "
        f"(success={result.success}, duration={result.duration.total_seconds():.3f}s)"
    )
