"""
Pytest fixtures for service tests.

Provides mocks for:
- SecretClient and DefaultAzureCredential for Key Vault operations
- In-memory fakes for the secret store, fixture store, partner API,
  telemetry sink and token refresher used by the availability probe
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shared.models import Credential
from tests.fixtures.fakes import (
    FakeFixtureStore,
    FakeSecretStore,
    FakeSleep,
    FakeTelemetry,
    FakeTokenRefresher,
)


@pytest.fixture
def mock_secret_client():
    """Mock SecretClient for Key Vault operations"""
    with patch("shared.keyvault.SecretClient") as mock_client_class:
        mock_instance = MagicMock()
        mock_client_class.return_value = mock_instance

        # In-memory secret storage for testing: name -> {"value", "expires_on"}
        secrets_store = {}

        async def mock_set_secret(name, value):
            secrets_store[name] = {"value": value, "expires_on": None}
            secret_obj = MagicMock()
            secret_obj.name = name
            secret_obj.value = value
            return secret_obj

        async def mock_get_secret(name):
            if name not in secrets_store:
                from azure.core.exceptions import ResourceNotFoundError
                raise ResourceNotFoundError(f"Secret not found: {name}")
            secret_obj = MagicMock()
            secret_obj.name = name
            secret_obj.value = secrets_store[name]["value"]
            secret_obj.properties.expires_on = secrets_store[name]["expires_on"]
            return secret_obj

        async def mock_update_properties(name, expires_on=None):
            if name not in secrets_store:
                from azure.core.exceptions import ResourceNotFoundError
                raise ResourceNotFoundError(f"Secret not found: {name}")
            secrets_store[name]["expires_on"] = expires_on
            return MagicMock()

        mock_instance.set_secret = AsyncMock(side_effect=mock_set_secret)
        mock_instance.get_secret = AsyncMock(side_effect=mock_get_secret)
        mock_instance.update_secret_properties = AsyncMock(side_effect=mock_update_properties)
        mock_instance.close = AsyncMock()

        yield {
            "client_class": mock_client_class,
            "instance": mock_instance,
            "secrets_store": secrets_store,
        }


@pytest.fixture
def mock_default_credential():
    """Mock DefaultAzureCredential"""
    with patch("shared.keyvault.DefaultAzureCredential") as mock:
        mock.return_value.close = AsyncMock()
        yield mock


@pytest.fixture
def valid_credential():
    return Credential(
        token="current-token",
        expires_on=datetime.now(timezone.utc) + timedelta(minutes=30),
    )


@pytest.fixture
def secret_store(valid_credential):
    return FakeSecretStore(valid_credential)


@pytest.fixture
def fixture_store():
    return FakeFixtureStore({"1": "{}"})


@pytest.fixture
def telemetry():
    return FakeTelemetry()


@pytest.fixture
def token_refresher():
    return FakeTokenRefresher()


@pytest.fixture
def fake_sleep():
    return FakeSleep()
