"""
Shared Services for the Quote Availability Monitor

Services:
- partner_client: HTTP client for the partner login and quote endpoints
- token_refresher: Password-grant login that stores the token in Key Vault
- fixture_store: Sample quote bodies in Table Storage
- availability_probe: One timed quote request reported as availability telemetry
"""

# Re-export commonly used services
from shared.services.partner_client import PartnerApiClient
from shared.services.token_refresher import TokenRefresher
from shared.services.fixture_store import FixtureStore
from shared.services.availability_probe import AvailabilityProbe

__all__ = [
    "PartnerApiClient",
    "TokenRefresher",
    "FixtureStore",
    "AvailabilityProbe",
]
