"""
Availability Probe
Posts one synthetic quote request per run and reports the outcome to
Application Insights as an availability test result.
"""

import asyncio
import logging
import random
import time
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable

from shared.config import MonitorConfig
from shared.errors import AuthRejected, CredentialStoreError, SlaViolation, UpstreamError
from shared.keyvault import KeyVaultClient
from shared.models import Credential, Fixture, ProbeResult, QuoteResponse
from shared.services.fixture_store import FixtureStore
from shared.services.partner_client import PartnerApiClient
from shared.services.token_refresher import TokenRefresher
from shared.telemetry import TelemetrySink

logger = logging.getLogger(__name__)


class AvailabilityProbe:
    """
    Synthetic availability test for the partner quote API.

    Each run:
    1. Reads the bearer token from Key Vault
    2. Picks a random fixture body (serial 1..MAX_MESSAGE_NUMBERS)
    3. Times one authenticated quote POST
    4. On 401 triggers a best-effort token refresh; on any non-200 waits
       SLA seconds before failing
    5. On 200 fails the run anyway if the call took longer than the SLA
    6. Emits exactly one availability record (plus an exception record on
       failure) and flushes the sink

    run_probe() never raises.
    """

    def __init__(
        self,
        config: MonitorConfig,
        secret_store: KeyVaultClient,
        fixture_store: FixtureStore,
        partner_client: PartnerApiClient,
        telemetry: TelemetrySink,
        token_refresher: TokenRefresher,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.secret_store = secret_store
        self.fixture_store = fixture_store
        self.partner_client = partner_client
        self.telemetry = telemetry
        self.token_refresher = token_refresher
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._clock = clock

    async def run_probe(self) -> ProbeResult:
        """Execute one availability test run and report it"""
        result = ProbeResult(
            name=self.config.test_name,
            location=self.config.test_location,
        )
        logger.info(f"Executing availability test run for {result.name} ({result.operation_id})")

        started: float | None = None
        try:
            credential = await self._get_credential()
            fixture = await self._select_fixture()

            started = self._clock()
            response = await self.partner_client.post_quote(
                self.config.quote_url, credential.token, fixture.body_content
            )
            if not response.ok:
                await self._fail_non_ok(response)

            result.success = True
            result.duration = timedelta(seconds=self._clock() - started)
            result.timestamp = datetime.now(timezone.utc)
            started = None

            if result.duration.total_seconds() > self.config.sla_seconds:
                result.success = False
                raise SlaViolation(
                    f"Quote API does not meet the SLA of {self.config.sla_seconds:g} seconds "
                    f"(took {result.duration.total_seconds():.3f}s)"
                )

        except Exception as e:
            result.success = False
            result.message = f"{type(e).__name__}: {e}"
            logger.error(f"Availability test {result.operation_id} failed: {result.message}")
            _emit_exception(self.telemetry, result, e)

        finally:
            if started is not None:
                result.duration = timedelta(seconds=self._clock() - started)
                result.timestamp = datetime.now(timezone.utc)
            if result.timestamp is None:
                result.timestamp = datetime.now(timezone.utc)
            await _emit_availability(self.telemetry, result)

        return result

    async def _get_credential(self) -> Credential:
        credential = await self.secret_store.get_credential(self.config.secret_name)
        if credential.is_expired():
            raise CredentialStoreError(
                f"Secret {self.config.secret_name} expired at {credential.expires_on.isoformat()}"
            )
        return credential

    async def _select_fixture(self) -> Fixture:
        serial_number = str(self._rng.randint(1, self.config.max_message_numbers))
        logger.info(f"Selecting body content for serial number {serial_number}")
        return await self.fixture_store.get_fixture(serial_number)

    async def _fail_non_ok(self, response: QuoteResponse) -> None:
        """Refresh on 401, throttle for SLA seconds, then raise"""
        logger.debug(f"Quote service responded {response.status}: {response.body}")

        if response.status == 401:
            logger.warning("Quote service rejected the bearer token, refreshing")
            await self._refresh_token()

        await self._sleep(self.config.sla_seconds)

        if response.status == 401:
            raise AuthRejected("Quote service rejected the bearer token (HTTP 401)")
        raise UpstreamError(
            f"Quote service returned an error with status code: {response.status}",
            status_code=response.status,
        )

    async def _refresh_token(self) -> None:
        try:
            await self.token_refresher.refresh_token()
            logger.info("Reactive token refresh succeeded")
        except Exception as e:
            logger.warning(f"Reactive token refresh failed: {e}")


async def report_failed_run(config: MonitorConfig, telemetry: TelemetrySink, error: Exception) -> ProbeResult:
    """
    Report a run that failed before the probe could start

    Used when the clients a run needs cannot be opened. Emits the same
    exception and availability records as a failed run_probe().
    """
    result = ProbeResult(
        name=config.test_name,
        location=config.test_location,
        message=f"{type(error).__name__}: {error}",
        timestamp=datetime.now(timezone.utc),
    )
    logger.error(f"Availability test {result.operation_id} could not start: {result.message}")
    _emit_exception(telemetry, result, error)
    await _emit_availability(telemetry, result)
    return result


def _emit_exception(telemetry: TelemetrySink, result: ProbeResult, error: Exception) -> None:
    try:
        telemetry.track_exception(result, error)
    except Exception as e:
        logger.error(f"Failed to track exception telemetry: {e}", exc_info=True)


async def _emit_availability(telemetry: TelemetrySink, result: ProbeResult) -> None:
    try:
        telemetry.track_availability(result)
        # flush posts synchronously
        await asyncio.to_thread(telemetry.flush)
    except Exception as e:
        logger.error(f"Failed to track availability telemetry: {e}", exc_info=True)
