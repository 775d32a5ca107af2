"""
Application Insights telemetry sink

Emits availability records and exception records for probe runs.
"""

import logging
from datetime import timedelta

from applicationinsights import TelemetryClient
from applicationinsights.channel import contracts

from shared.models import ProbeResult

logger = logging.getLogger(__name__)


class AvailabilityData(contracts.AvailabilityData):
    """Availability item with the envelope names TelemetryChannel.write reads"""
    ENVELOPE_TYPE_NAME = 'Microsoft.ApplicationInsights.Availability'
    DATA_TYPE_NAME = 'AvailabilityData'


def format_duration(duration: timedelta) -> str:
    """Format a timedelta as an Application Insights duration (d.hh:mm:ss.fff)"""
    total_ms = int(duration.total_seconds() * 1000)
    parts = []
    for multiplier in (1000, 60, 60, 24):
        parts.append(total_ms % multiplier)
        total_ms //= multiplier
    parts.reverse()
    return '%d.%02d:%02d:%02d.%03d' % (total_ms, *parts)


class TelemetrySink:
    """
    Thin wrapper around the Application Insights TelemetryClient.

    Usage:
        sink = TelemetrySink(instrumentation_key)
        sink.track_exception(result, error)
        sink.track_availability(result)
        sink.flush()
    """

    def __init__(self, instrumentation_key: str, client: TelemetryClient | None = None):
        self._client = client or TelemetryClient(instrumentation_key)

    def track_availability(self, result: ProbeResult) -> None:
        data = AvailabilityData()
        data.id = result.operation_id
        data.name = result.name
        data.run_location = result.location
        data.success = result.success
        data.duration = format_duration(result.duration)
        if result.message:
            data.message = result.message
        if result.timestamp is not None:
            data.properties = {"Timestamp": result.timestamp.isoformat()}

        self._client.context.operation.id = result.operation_id
        self._client.channel.write(data, self._client.context)
        logger.debug(f"Tracked availability {result.operation_id} (success={result.success})")

    def track_exception(self, result: ProbeResult, error: BaseException) -> None:
        self._client.context.operation.id = result.operation_id
        self._client.track_exception(
            type(error),
            error,
            error.__traceback__,
            properties={
                "TestName": result.name,
                "TestLocation": result.location,
            },
        )

    def flush(self) -> None:
        self._client.flush()
