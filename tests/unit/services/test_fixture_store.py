"""
Unit tests for FixtureStore and AsyncTableStorageService point reads
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from azure.core.exceptions import ResourceNotFoundError, ServiceRequestError

from shared.async_storage import AsyncTableStorageService
from shared.errors import FixtureNotFoundError
from shared.services.fixture_store import FixtureStore


@pytest.fixture
def mock_table():
    """AsyncTableStorageService double"""
    table = AsyncMock(spec=AsyncTableStorageService)
    return table


class TestFixtureStore:
    """Test get_fixture"""

    async def test_get_fixture_found(self, mock_table):
        mock_table.get_entity.return_value = {
            "PartitionKey": "SB",
            "RowKey": "3",
            "BodyContent": '{"loanAmount": 3000}',
            "QuoteName": "SB",
        }
        store = FixtureStore(mock_table, "SB")

        fixture = await store.get_fixture("3")

        mock_table.get_entity.assert_awaited_once_with("SB", "3")
        assert fixture.serial_number == "3"
        assert fixture.body_content == '{"loanAmount": 3000}'
        assert fixture.quote_name == "SB"

    async def test_get_fixture_missing(self, mock_table):
        mock_table.get_entity.return_value = None
        store = FixtureStore(mock_table, "SB")

        with pytest.raises(FixtureNotFoundError, match="SB/9"):
            await store.get_fixture("9")

    async def test_get_fixture_without_body(self, mock_table):
        mock_table.get_entity.return_value = {"PartitionKey": "SB", "RowKey": "1"}
        store = FixtureStore(mock_table, "SB")

        with pytest.raises(FixtureNotFoundError):
            await store.get_fixture("1")

    async def test_get_fixture_storage_error(self, mock_table):
        mock_table.get_entity.side_effect = ServiceRequestError("connection refused")
        store = FixtureStore(mock_table, "SB")

        with pytest.raises(FixtureNotFoundError, match="connection refused"):
            await store.get_fixture("1")


class TestAsyncTableStorageService:
    """Test the table wrapper against a mocked TableClient"""

    def test_requires_connection_string(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValueError, match="AzureWebJobsStorage"):
                AsyncTableStorageService("OrgAPITestBodyContent")

    async def test_get_entity_returns_dict(self):
        with patch("shared.async_storage.TableClient") as mock_table_client_class:
            client = MagicMock()
            client.get_entity = AsyncMock(return_value={"PartitionKey": "SB", "RowKey": "1", "BodyContent": "{}"})
            mock_table_client_class.from_connection_string.return_value = client

            service = AsyncTableStorageService("OrgAPITestBodyContent", "UseDevelopmentStorage=true")
            entity = await service.get_entity("SB", "1")

            assert entity["BodyContent"] == "{}"
            client.get_entity.assert_awaited_once_with(partition_key="SB", row_key="1")

    async def test_get_entity_not_found_returns_none(self):
        with patch("shared.async_storage.TableClient") as mock_table_client_class:
            client = MagicMock()
            client.get_entity = AsyncMock(side_effect=ResourceNotFoundError("Not found"))
            mock_table_client_class.from_connection_string.return_value = client

            service = AsyncTableStorageService("OrgAPITestBodyContent", "UseDevelopmentStorage=true")

            assert await service.get_entity("SB", "42") is None

    async def test_context_manager_reuses_and_closes_client(self):
        with patch("shared.async_storage.TableClient") as mock_table_client_class:
            client = MagicMock()
            client.__aenter__ = AsyncMock(return_value=client)
            client.__aexit__ = AsyncMock(return_value=None)
            client.get_entity = AsyncMock(return_value={"RowKey": "1"})
            mock_table_client_class.from_connection_string.return_value = client

            async with AsyncTableStorageService("OrgAPITestBodyContent", "UseDevelopmentStorage=true") as service:
                await service.get_entity("SB", "1")
                await service.get_entity("SB", "1")

            mock_table_client_class.from_connection_string.assert_called_once()
            client.__aexit__.assert_awaited_once()
